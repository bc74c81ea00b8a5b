"""Status events and raw-record validation.

Raw records come from the event log as plain mappings::

    {"tail_number": "VT-ABC", "status": "departing",
     "timestamp": "2025-03-01T09:00:00Z", "direction": "27"}

A record with a blank tail number, an unknown status, or a missing or
unparsable timestamp is rejected. Rejected records are described in
:class:`RejectedRecord` and never coerced to a default time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from flightlog.domain.errors import InvalidEventError


class EventKind(StrEnum):
    """What the aircraft was doing when the event was logged."""

    DEPARTING = "departing"
    ARRIVING = "arriving"


@dataclass(frozen=True)
class StatusEvent:
    """A validated departure or arrival of one aircraft."""

    tail_number: str
    kind: EventKind
    timestamp: datetime  # always timezone-aware UTC
    direction: str | None = None
    sequence: int = 0  # position in the fetched snapshot, tie-break only


@dataclass(frozen=True)
class RejectedRecord:
    """A raw record excluded from reconstruction."""

    index: int
    reason: str
    tail_number: str | None = None


@dataclass(frozen=True)
class EventBatch:
    """Result of validating a snapshot of raw records."""

    events: list[StatusEvent] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)


def parse_timestamp(value: Any) -> datetime:
    """Parse a raw timestamp into an aware UTC datetime.

    Accepts ``datetime`` objects (naive values are taken as UTC) and
    ISO-8601 strings, including a trailing ``Z``.

    Raises:
        InvalidEventError: if the value is missing, blank, or unparsable,
            or falls outside the datetime range once converted to UTC.
    """
    if value is None:
        raise InvalidEventError("missing timestamp")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw or raw.lower() in ("undefined", "null", "none"):
            raise InvalidEventError("missing timestamp")
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise InvalidEventError(f"unparsable timestamp {raw!r}") from exc
    else:
        raise InvalidEventError(f"unsupported timestamp type {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError) as exc:
        raise InvalidEventError(f"timestamp out of range {value!s}") from exc


def parse_event(record: Mapping[str, Any], *, sequence: int = 0) -> StatusEvent:
    """Validate one raw record.

    Raises:
        InvalidEventError: if any required field is missing or malformed.
    """
    if not isinstance(record, Mapping):
        raise InvalidEventError("record is not a mapping")

    raw_tail = record.get("tail_number")
    tail = raw_tail.strip() if isinstance(raw_tail, str) else ""
    if not tail:
        raise InvalidEventError("missing tail number")

    raw_status = record.get("status")
    status = raw_status.strip().lower() if isinstance(raw_status, str) else ""
    try:
        kind = EventKind(status)
    except ValueError as exc:
        reason = f"unknown status {raw_status!r}" if status else "missing status"
        raise InvalidEventError(reason, tail_number=tail) from exc

    try:
        timestamp = parse_timestamp(record.get("timestamp"))
    except InvalidEventError as exc:
        raise InvalidEventError(exc.reason, tail_number=tail) from exc

    direction = record.get("direction")
    return StatusEvent(
        tail_number=tail,
        kind=kind,
        timestamp=timestamp,
        direction=str(direction) if direction not in (None, "") else None,
        sequence=sequence,
    )


def parse_events(records: Iterable[Mapping[str, Any]]) -> EventBatch:
    """Validate a snapshot of raw records, collecting rejections."""
    events: list[StatusEvent] = []
    rejected: list[RejectedRecord] = []
    for index, record in enumerate(records):
        try:
            events.append(parse_event(record, sequence=index))
        except InvalidEventError as exc:
            rejected.append(
                RejectedRecord(index=index, reason=exc.reason, tail_number=exc.tail_number)
            )
    return EventBatch(events=events, rejected=rejected)
