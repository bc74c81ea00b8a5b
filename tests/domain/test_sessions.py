"""Tests for flight session reconstruction."""

from __future__ import annotations

import random
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from flightlog.domain.sessions import (
    FlightSession,
    SessionState,
    pair_events,
    pair_partition,
    reconstruct,
)
from tests.conftest import at, event


class TestSingleTail:
    def test_departure_then_arrival_completes(self) -> None:
        sessions = reconstruct(
            [
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T10:30:00Z"),
            ]
        )
        assert len(sessions) == 1
        s = sessions[0]
        assert s.state is SessionState.COMPLETED
        assert s.outbound == at("2025-03-01T09:00:00Z")
        assert s.inbound == at("2025-03-01T10:30:00Z")
        assert s.duration_minutes == 90
        assert s.flight_hours == Decimal("1.5")
        assert s.duration_label == "1h 30m"
        assert s.date == date(2025, 3, 1)

    def test_lone_departure_is_in_progress(self) -> None:
        [s] = reconstruct([event("VT-ABC", "departing", "2025-03-01T14:00:00Z")])
        assert s.state is SessionState.IN_PROGRESS
        assert s.inbound is None
        assert s.duration_minutes is None
        assert s.flight_hours == 0
        assert s.duration_label == "—"

    def test_lone_arrival_is_arrived_only(self) -> None:
        [s] = reconstruct([event("VT-ABC", "arriving", "2025-03-01T08:00:00Z")])
        assert s.state is SessionState.ARRIVED_ONLY
        assert s.outbound is None
        assert s.inbound == at("2025-03-01T08:00:00Z")
        assert s.date == date(2025, 3, 1)

    def test_two_departures_in_a_row(self) -> None:
        sessions = reconstruct(
            [
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z"),
                event("VT-ABC", "departing", "2025-03-01T11:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T12:00:00Z"),
            ]
        )
        assert [s.state for s in sessions] == [
            SessionState.IN_PROGRESS,
            SessionState.COMPLETED,
        ]
        assert sessions[1].duration_minutes == 60

    def test_second_arrival_is_not_paired(self) -> None:
        """Only one arrival may close a departure."""
        sessions = reconstruct(
            [
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T10:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T10:05:00Z"),
            ]
        )
        assert [s.state for s in sessions] == [
            SessionState.COMPLETED,
            SessionState.ARRIVED_ONLY,
        ]

    def test_unsorted_input_is_sorted_per_tail(self) -> None:
        sessions = reconstruct(
            [
                event("VT-ABC", "arriving", "2025-03-01T10:30:00Z"),
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z"),
            ]
        )
        assert [s.state for s in sessions] == [SessionState.COMPLETED]

    def test_overnight_flight_pairs_across_dates(self) -> None:
        [s] = reconstruct(
            [
                event("VT-ABC", "departing", "2025-03-01T23:30:00Z"),
                event("VT-ABC", "arriving", "2025-03-02T01:15:00Z"),
            ]
        )
        assert s.state is SessionState.COMPLETED
        assert s.duration_minutes == 105
        assert s.date == date(2025, 3, 1)

    def test_date_uses_utc(self) -> None:
        [s] = reconstruct([event("VT-ABC", "departing", "2025-03-02T01:00:00+05:30")])
        assert s.date == date(2025, 3, 1)

    def test_partial_minutes_floor(self) -> None:
        [s] = reconstruct(
            [
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T09:45:59Z"),
            ]
        )
        assert s.duration_minutes == 45

    def test_equal_timestamps_keep_snapshot_order(self) -> None:
        sessions = reconstruct(
            [
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z", sequence=0),
                event("VT-ABC", "arriving", "2025-03-01T09:00:00Z", sequence=1),
            ]
        )
        assert [s.state for s in sessions] == [SessionState.COMPLETED]
        assert sessions[0].duration_minutes == 0

        reversed_sessions = reconstruct(
            [
                event("VT-ABC", "arriving", "2025-03-01T09:00:00Z", sequence=0),
                event("VT-ABC", "departing", "2025-03-01T09:00:00Z", sequence=1),
            ]
        )
        assert [s.state for s in reversed_sessions] == [
            SessionState.ARRIVED_ONLY,
            SessionState.IN_PROGRESS,
        ]


class TestNegativeDuration:
    def test_pairing_refused(self) -> None:
        """An arrival before its departure is not paired."""
        result = pair_partition(
            [
                event("VT-ABC", "departing", "2025-03-01T10:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T09:00:00Z"),
            ]
        )
        assert [s.state for s in result.sessions] == [
            SessionState.IN_PROGRESS,
            SessionState.ARRIVED_ONLY,
        ]
        assert result.sessions[0].flight_hours == 0
        assert len(result.anomalies) == 1
        anomaly = result.anomalies[0]
        assert anomaly.tail_number == "VT-ABC"
        assert anomaly.inbound < anomaly.outbound

    def test_arrival_is_reconsidered_next(self) -> None:
        result = pair_partition(
            [
                event("VT-ABC", "departing", "2025-03-01T10:00:00Z"),
                event("VT-ABC", "arriving", "2025-03-01T09:00:00Z"),
                event("VT-ABC", "departing", "2025-03-01T11:00:00Z"),
            ]
        )
        assert len(result.sessions) == 3
        assert result.sessions[1].state is SessionState.ARRIVED_ONLY


def _fleet_events() -> list:
    return [
        event("VT-ABC", "departing", "2025-03-01T09:00:00Z", sequence=0),
        event("VT-XYZ", "arriving", "2025-03-01T07:00:00Z", sequence=1),
        event("VT-ABC", "arriving", "2025-03-01T10:30:00Z", sequence=2),
        event("VT-XYZ", "departing", "2025-03-01T11:00:00Z", sequence=3),
        event("VT-ABC", "departing", "2025-03-01T14:00:00Z", sequence=4),
        event("VT-XYZ", "departing", "2025-03-01T13:00:00Z", sequence=5),
        event("VT-XYZ", "arriving", "2025-03-01T15:00:00Z", sequence=6),
        event("VT-ABC", "arriving", "2025-03-01T15:00:00Z", sequence=7),
        event("VT-ABC", "arriving", "2025-03-01T15:30:00Z", sequence=8),
    ]


def _shuffle_keeping_tail_order(events: list, seed: int) -> list:
    """Interleave tails randomly while keeping each tail's relative order."""
    rng = random.Random(seed)
    queues: dict[str, list] = {}
    for ev in events:
        queues.setdefault(ev.tail_number, []).append(ev)
    out = []
    while any(queues.values()):
        tail = rng.choice([t for t, q in queues.items() if q])
        out.append(queues[tail].pop(0))
    return out


class TestProperties:
    def test_every_event_in_exactly_one_session(self) -> None:
        events = _fleet_events()
        sessions = reconstruct(events)
        used = 0
        for s in sessions:
            used += (s.outbound is not None) + (s.inbound is not None)
        assert used == len(events)

        endpoints = sorted(
            (s.tail_number, t) for s in sessions for t in (s.outbound, s.inbound) if t is not None
        )
        expected = sorted((e.tail_number, e.timestamp) for e in events)
        assert endpoints == expected

    def test_no_negative_durations(self) -> None:
        for s in reconstruct(_fleet_events()):
            if s.state is SessionState.COMPLETED:
                assert s.inbound is not None and s.outbound is not None
                assert s.inbound >= s.outbound
                assert s.duration_minutes is not None and s.duration_minutes >= 0

    def test_state_invariants(self) -> None:
        for s in reconstruct(_fleet_events()):
            if s.state is SessionState.COMPLETED:
                assert s.outbound and s.inbound and s.duration_minutes is not None
            elif s.state is SessionState.IN_PROGRESS:
                assert s.outbound and s.inbound is None and s.duration_minutes is None
            else:
                assert s.outbound is None and s.inbound and s.duration_minutes is None

    def test_independent_of_interleaving(self) -> None:
        events = _fleet_events()
        expected = reconstruct(events)
        for seed in range(10):
            assert reconstruct(_shuffle_keeping_tail_order(events, seed)) == expected

    def test_repeatable(self) -> None:
        events = _fleet_events()
        assert pair_events(events) == pair_events(events)

    def test_output_ordered_by_tail_then_time(self) -> None:
        sessions = reconstruct(_fleet_events())
        keys = [(s.tail_number, s.started_at) for s in sessions]
        assert keys == sorted(keys)

    def test_fleet_states(self) -> None:
        by_tail: dict[str, list[SessionState]] = {}
        for s in reconstruct(_fleet_events()):
            by_tail.setdefault(s.tail_number, []).append(s.state)
        assert by_tail["VT-ABC"] == [
            SessionState.COMPLETED,
            SessionState.COMPLETED,
            SessionState.ARRIVED_ONLY,
        ]
        assert by_tail["VT-XYZ"] == [
            SessionState.ARRIVED_ONLY,
            SessionState.IN_PROGRESS,
            SessionState.COMPLETED,
        ]


class TestFlightSession:
    def test_frozen(self) -> None:
        s = FlightSession(tail_number="VT-ABC", date=date(2025, 3, 1), state=SessionState.IN_PROGRESS)
        with pytest.raises(FrozenInstanceError):
            s.tail_number = "VT-XYZ"  # type: ignore[misc]

    def test_long_duration_label(self) -> None:
        s = FlightSession(
            tail_number="VT-ABC",
            date=date(2025, 3, 1),
            state=SessionState.COMPLETED,
            outbound=at("2025-03-01T00:00:00Z"),
            inbound=at("2025-03-01T13:05:00Z"),
            duration_minutes=785,
        )
        assert s.duration_label == "13h 5m"
