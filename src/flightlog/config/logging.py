"""structlog configuration for flightlog.

All log output goes to stderr so stdout stays reserved for results:
- Human (default): console renderer, coloured only on a TTY
- JSON (--log-json): one structured JSON object per line

Stdlib loggers (``logging.getLogger(__name__)``) are routed through the
same processor chain, so service and infrastructure modules need no
structlog import of their own.
"""

from __future__ import annotations

import logging
import sys

import structlog

APP_LOGGER = "flightlog"

# Libraries that log per-statement or per-connection at INFO/DEBUG.
_NOISY_LOGGERS = ("sqlalchemy", "sqlalchemy.engine")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _stderr_handler(processors: list[structlog.types.Processor], log_json: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )
    handler.set_name(APP_LOGGER)
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and install the stderr handler.

    Safe to call more than once: a handler installed by an earlier call
    is replaced, handlers added by others are left in place.

    Args:
        verbose: DEBUG for the ``flightlog`` logger. When False, WARNING+.
        log_json: JSON lines instead of the console renderer.
    """
    processors = _shared_processors()
    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == APP_LOGGER:
            root_logger.removeHandler(existing)
    root_logger.addHandler(_stderr_handler(processors, log_json))
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
