"""Bounded snapshot fetch.

The source is read on a daemon worker thread so a hung store can neither
block the caller past *timeout* seconds nor keep the process alive once
the command has finished. A timeout or any failure raised by the source
becomes :class:`SourceUnavailableError`; no partial snapshot is ever
returned.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any

from flightlog.infrastructure.store import EventSource, SourceUnavailableError

logger = logging.getLogger(__name__)


def fetch_snapshot(source: EventSource, *, timeout: float) -> list[dict[str, Any]]:
    """Fetch all raw records from *source*, waiting at most *timeout* seconds.

    Raises:
        SourceUnavailableError: on timeout or source failure.
    """
    outcome: queue.Queue[tuple[bool, Any]] = queue.Queue(maxsize=1)

    def _fetch() -> None:
        try:
            outcome.put((True, source.fetch_events()))
        except Exception as exc:
            outcome.put((False, exc))

    worker = threading.Thread(target=_fetch, name="flightlog-fetch", daemon=True)
    worker.start()
    try:
        ok, payload = outcome.get(timeout=timeout)
    except queue.Empty as exc:
        # The worker is abandoned; being a daemon it cannot hold up exit.
        logger.warning("Event fetch timed out after %.1fs", timeout)
        msg = f"Event source did not respond within {timeout:g}s"
        raise SourceUnavailableError(msg) from exc

    if not ok:
        if isinstance(payload, SourceUnavailableError):
            raise payload
        logger.warning("Event fetch failed", exc_info=payload)
        raise SourceUnavailableError(f"Event source failed: {payload}") from payload

    records: list[dict[str, Any]] = payload
    logger.debug("Fetched %d raw records", len(records))
    return records
