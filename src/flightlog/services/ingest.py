"""IngestService — append status events to the log.

Records are validated before they are written so the local log only
grows with events reconstruction can use. The log itself stays
append-only; corrections are made by appending, never by editing.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from flightlog.domain.errors import ErrorCode, InvalidEventError
from flightlog.domain.events import StatusEvent, parse_event, parse_events
from flightlog.infrastructure.store import SourceUnavailableError
from flightlog.services.base import BaseService
from flightlog.services.contracts import Diagnostics
from flightlog.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _as_record(event: StatusEvent) -> dict[str, Any]:
    return {
        "tail_number": event.tail_number,
        "status": str(event.kind),
        "direction": event.direction,
        "timestamp": event.timestamp.isoformat(),
    }


class IngestService(BaseService):
    """Writes new events to the local store."""

    def record_event(
        self,
        tail_number: str,
        status: str,
        *,
        at: datetime | str | None = None,
        direction: str | None = None,
    ) -> ServiceResult:
        """Append a single event; *at* defaults to the current UTC time."""
        op = "record_event"
        record = {
            "tail_number": tail_number,
            "status": status,
            "timestamp": at if at is not None else datetime.now(UTC),
            "direction": direction,
        }
        try:
            event = parse_event(record)
        except InvalidEventError as exc:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_EVENT, f"Invalid event: {exc.reason}"
            )

        row = _as_record(event)
        try:
            row_id = self._ledger.store.append(row)
        except SourceUnavailableError as exc:
            return self._source_unavailable(op, exc)
        logger.debug("Recorded %s %s as row %d", event.tail_number, event.kind, row_id)
        return ServiceResult(ok=True, op=op, data={"id": row_id, **row})

    def ingest_records(self, records: Iterable[Mapping[str, Any]]) -> ServiceResult:
        """Append every valid record; invalid ones are reported, not written."""
        op = "ingest"
        batch = parse_events(records)
        try:
            written = self._ledger.store.append_many(_as_record(e) for e in batch.events)
        except SourceUnavailableError as exc:
            return self._source_unavailable(op, exc)
        diagnostics = Diagnostics.collect(batch.rejected, [])
        logger.debug("Ingested %d records, rejected %d", written, len(batch.rejected))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "written": written,
                "rejected": diagnostics.rejected,
                "rejected_records": [r.model_dump() for r in diagnostics.rejected_records],
            },
            warnings=diagnostics.warnings(),
        )

    def ingest_file(self, path: Path) -> ServiceResult:
        """Ingest a JSON file holding a list of records (or ``{"events": [...]}``)."""
        op = "ingest"
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, f"Cannot read {path}: {exc}"
            )

        if isinstance(payload, Mapping):
            payload = payload.get("events")
        if not isinstance(payload, list):
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"{path} must contain a JSON list of events",
            )
        return self.ingest_records(payload)
