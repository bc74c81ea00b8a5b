"""Flight session reconstruction from status events.

Events are partitioned by tail number, sorted by timestamp (stable, so
equal timestamps keep snapshot order), and scanned with one forward
cursor:

- departing + immediately following arriving -> completed
- departing with anything else next          -> in progress
- arriving not consumed by a departure       -> arrived only

Pairing never looks past the next event of the same aircraft and never
re-pairs a consumed event. There is no date bucketing: a late-night
departure pairs with an early-morning arrival.

INVARIANT: no session ever carries a negative duration.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from enum import StrEnum

from flightlog.domain.events import EventKind, StatusEvent

_MINUTE = timedelta(minutes=1)
_MINUTES_PER_HOUR = Decimal(60)


class SessionState(StrEnum):
    """Lifecycle state of a reconstructed flight."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    ARRIVED_ONLY = "arrived_only"


@dataclass(frozen=True)
class FlightSession:
    """One reconstructed flight, spanning one or two status events."""

    tail_number: str
    date: date
    state: SessionState
    outbound: datetime | None = None
    inbound: datetime | None = None
    duration_minutes: int | None = None

    @property
    def flight_hours(self) -> Decimal:
        """Flown hours; zero unless the session is completed."""
        if self.state is not SessionState.COMPLETED or self.duration_minutes is None:
            return Decimal(0)
        return Decimal(self.duration_minutes) / _MINUTES_PER_HOUR

    @property
    def duration_label(self) -> str:
        """Human label such as ``1h 30m``; an em dash when unknown."""
        if self.duration_minutes is None:
            return "—"
        hours, minutes = divmod(self.duration_minutes, 60)
        return f"{hours}h {minutes}m"

    @property
    def started_at(self) -> datetime:
        """First known timestamp of the session."""
        first = self.outbound or self.inbound
        assert first is not None
        return first


@dataclass(frozen=True)
class NegativeDurationAnomaly:
    """A departure/arrival pair refused because the arrival came first."""

    tail_number: str
    outbound: datetime
    inbound: datetime


@dataclass(frozen=True)
class Reconstruction:
    """Sessions plus the pairing anomalies met while building them."""

    sessions: list[FlightSession] = field(default_factory=list)
    anomalies: list[NegativeDurationAnomaly] = field(default_factory=list)


def session_date(moment: datetime) -> date:
    """Calendar date of *moment* in UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(UTC).date()


def _completed(departure: StatusEvent, arrival: StatusEvent) -> FlightSession:
    minutes = (arrival.timestamp - departure.timestamp) // _MINUTE
    return FlightSession(
        tail_number=departure.tail_number,
        date=session_date(departure.timestamp),
        state=SessionState.COMPLETED,
        outbound=departure.timestamp,
        inbound=arrival.timestamp,
        duration_minutes=int(minutes),
    )


def _in_progress(departure: StatusEvent) -> FlightSession:
    return FlightSession(
        tail_number=departure.tail_number,
        date=session_date(departure.timestamp),
        state=SessionState.IN_PROGRESS,
        outbound=departure.timestamp,
    )


def _arrived_only(arrival: StatusEvent) -> FlightSession:
    return FlightSession(
        tail_number=arrival.tail_number,
        date=session_date(arrival.timestamp),
        state=SessionState.ARRIVED_ONLY,
        inbound=arrival.timestamp,
    )


def pair_partition(events: Sequence[StatusEvent]) -> Reconstruction:
    """Pair one aircraft's events in the order given.

    The caller is responsible for ordering; :func:`pair_events` sorts
    before delegating here.
    """
    sessions: list[FlightSession] = []
    anomalies: list[NegativeDurationAnomaly] = []
    i = 0
    while i < len(events):
        current = events[i]
        nxt = events[i + 1] if i + 1 < len(events) else None

        if current.kind is EventKind.DEPARTING:
            if nxt is not None and nxt.kind is EventKind.ARRIVING:
                if nxt.timestamp >= current.timestamp:
                    sessions.append(_completed(current, nxt))
                    i += 2
                    continue
                anomalies.append(
                    NegativeDurationAnomaly(
                        tail_number=current.tail_number,
                        outbound=current.timestamp,
                        inbound=nxt.timestamp,
                    )
                )
            sessions.append(_in_progress(current))
        else:
            sessions.append(_arrived_only(current))
        i += 1

    return Reconstruction(sessions=sessions, anomalies=anomalies)


def pair_events(events: Iterable[StatusEvent]) -> Reconstruction:
    """Reconstruct sessions for every aircraft in *events*.

    Output is ordered by tail number, then chronologically, so it does
    not depend on how the snapshot interleaves different aircraft.
    """
    partitions: dict[str, list[StatusEvent]] = defaultdict(list)
    for event in events:
        partitions[event.tail_number].append(event)

    sessions: list[FlightSession] = []
    anomalies: list[NegativeDurationAnomaly] = []
    for tail in sorted(partitions):
        ordered = sorted(partitions[tail], key=lambda e: (e.timestamp, e.sequence))
        result = pair_partition(ordered)
        sessions.extend(result.sessions)
        anomalies.extend(result.anomalies)

    return Reconstruction(sessions=sessions, anomalies=anomalies)


def reconstruct(events: Iterable[StatusEvent]) -> list[FlightSession]:
    """Pure reconstruction: same events in, same sessions out."""
    return pair_events(events).sessions
