"""Event log access — the source of raw status records.

:class:`EventSource` is the seam the service layer depends on. The only
production implementation is :class:`SqlEventStore`; tests and other
callers may supply their own source as long as it returns plain
record mappings and raises :class:`SourceUnavailableError` on failure.

INVARIANT: the store is append-only. Nothing here updates or deletes rows.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError

from flightlog.infrastructure.database.schema import flight_log

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_RECORD_FIELDS = ("tail_number", "status", "direction", "timestamp")


class SourceUnavailableError(RuntimeError):
    """The event snapshot could not be obtained."""


class EventSource(ABC):
    """Supplies a snapshot of raw status records."""

    @abstractmethod
    def fetch_events(self) -> list[dict[str, Any]]:
        """Return every raw record currently in the log.

        Raises:
            SourceUnavailableError: if the log cannot be read.
        """
        ...


def _to_row(record: Mapping[str, Any]) -> dict[str, Any]:
    timestamp = record.get("timestamp")
    if isinstance(timestamp, datetime):
        timestamp = timestamp.isoformat()
    return {
        "tail_number": record.get("tail_number"),
        "status": record.get("status"),
        "direction": record.get("direction"),
        "timestamp": timestamp,
        "recorded_at": datetime.now(UTC).isoformat(),
    }


class SqlEventStore(EventSource):
    """SQLite-backed event log."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def fetch_events(self) -> list[dict[str, Any]]:
        stmt = select(*(flight_log.c[name] for name in _RECORD_FIELDS)).order_by(
            flight_log.c.id
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            logger.warning("Event log read failed: %s", exc)
            raise SourceUnavailableError(f"Event log unavailable: {exc}") from exc
        return [dict(row) for row in rows]

    def append(self, record: Mapping[str, Any]) -> int:
        """Append one record and return its row id."""
        try:
            with self._engine.begin() as conn:
                result = conn.execute(insert(flight_log).values(**_to_row(record)))
        except SQLAlchemyError as exc:
            raise SourceUnavailableError(f"Event log write failed: {exc}") from exc
        return int(result.inserted_primary_key[0])

    def append_many(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Append *records* in one transaction; returns how many were written."""
        rows = [_to_row(record) for record in records]
        if not rows:
            return 0
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(flight_log), rows)
        except SQLAlchemyError as exc:
            raise SourceUnavailableError(f"Event log write failed: {exc}") from exc
        return len(rows)

    def count(self) -> int:
        """Number of records in the log."""
        with self._engine.connect() as conn:
            return int(conn.execute(select(func.count(flight_log.c.id))).scalar_one() or 0)
