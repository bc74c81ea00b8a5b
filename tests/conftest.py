"""Shared pytest fixtures and test helpers for flightlog tests."""

from __future__ import annotations

import threading
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from flightlog.config.settings import FlightlogSettings
from flightlog.domain.events import EventKind, StatusEvent, parse_timestamp
from flightlog.infrastructure.ledger import Ledger
from flightlog.infrastructure.store import EventSource, SourceUnavailableError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host FLIGHTLOG_* variables out of every test."""
    monkeypatch.delenv("FLIGHTLOG_CONFIG", raising=False)
    monkeypatch.delenv("FLIGHTLOG_ROOT", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> FlightlogSettings:
    return FlightlogSettings.from_cli(root=tmp_path)


@pytest.fixture
def ledger(settings: FlightlogSettings) -> Generator[Ledger]:
    """Ledger backed by a fresh SQLite log in a temp directory."""
    led = Ledger(settings)
    try:
        yield led
    finally:
        led.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated log.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def record(tail: str, status: str, timestamp: Any, **extra: Any) -> dict[str, Any]:
    """Raw log record as the store returns it."""
    return {"tail_number": tail, "status": status, "timestamp": timestamp, **extra}


def event(tail: str, kind: str, when: str, sequence: int = 0) -> StatusEvent:
    """Validated event at ISO time *when*."""
    return StatusEvent(
        tail_number=tail,
        kind=EventKind(kind),
        timestamp=parse_timestamp(when),
        sequence=sequence,
    )


def at(when: str) -> datetime:
    return parse_timestamp(when)


class StaticSource(EventSource):
    """In-memory source returning a fixed snapshot."""

    def __init__(self, records: list[dict[str, Any]]) -> None:
        self.records = records
        self.calls = 0

    def fetch_events(self) -> list[dict[str, Any]]:
        self.calls += 1
        return [dict(r) for r in self.records]


class BrokenSource(EventSource):
    """Source whose transport always fails."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or ConnectionError("connection refused")

    def fetch_events(self) -> list[dict[str, Any]]:
        raise self.exc


class HangingSource(EventSource):
    """Source that blocks until released (never, unless a test sets it)."""

    def __init__(self) -> None:
        self.release = threading.Event()

    def fetch_events(self) -> list[dict[str, Any]]:
        self.release.wait()
        return []


class UnavailableSource(EventSource):
    def fetch_events(self) -> list[dict[str, Any]]:
        raise SourceUnavailableError("store offline")


def ledger_with(settings: FlightlogSettings, records: list[dict[str, Any]]) -> Ledger:
    """Ledger reading from an in-memory snapshot."""
    return Ledger(settings, source=StaticSource(records))
