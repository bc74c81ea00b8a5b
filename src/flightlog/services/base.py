"""BaseService — shared foundation for flightlog services.

Every service receives a :class:`Ledger` at construction time and reads
events through :meth:`BaseService._load_events`, which bounds the fetch
by the configured timeout and validates the raw records.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flightlog.domain.errors import ErrorCode
from flightlog.domain.events import EventBatch, parse_events
from flightlog.infrastructure.snapshot import fetch_snapshot
from flightlog.services.result import ServiceResult

if TYPE_CHECKING:
    from flightlog.infrastructure.ledger import Ledger
    from flightlog.infrastructure.store import SourceUnavailableError

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class SessionService(BaseService):
            def list_sessions(self) -> ServiceResult:
                batch = self._load_events()
                ...
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    def _load_events(self, *, timeout: float | None = None) -> EventBatch:
        """Fetch a snapshot and validate it.

        Raises:
            SourceUnavailableError: if the snapshot cannot be obtained.
        """
        limit = timeout if timeout is not None else self._ledger.fetch_timeout
        records = fetch_snapshot(self._ledger.source, timeout=limit)
        batch = parse_events(records)
        for rejected in batch.rejected:
            logger.debug("Rejected record #%d: %s", rejected.index, rejected.reason)
        if batch.rejected:
            logger.warning(
                "Excluded %d of %d records from reconstruction",
                len(batch.rejected),
                len(records),
            )
        return batch

    @staticmethod
    def _source_unavailable(op: str, exc: SourceUnavailableError) -> ServiceResult:
        return ServiceResult.failure(op, ErrorCode.SOURCE_UNAVAILABLE, str(exc))
