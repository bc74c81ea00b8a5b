"""Command: append one status event to the log."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flightlog.commands._base import FlightlogCommand

if TYPE_CHECKING:
    from flightlog.commands._context import AppContext


@click.command(
    cls=FlightlogCommand,
    examples="""\
  flightlog record VT-ABC departing
  flightlog record VT-ABC arriving --at 2025-03-01T10:30:00Z
  flightlog record VT-XYZ departing --direction 27""",
)
@click.argument("tail_number")
@click.argument("status", type=click.Choice(["departing", "arriving"], case_sensitive=False))
@click.option("--at", "at", default=None, help="ISO-8601 timestamp (default: now, UTC).")
@click.option("--direction", default=None, help="Optional direction label.")
@click.pass_obj
def record(
    app: AppContext,
    tail_number: str,
    status: str,
    at: str | None,
    direction: str | None,
) -> None:
    """Record an aircraft departing or arriving."""
    from flightlog.services.ingest import IngestService

    app.emit(
        IngestService(app.ledger).record_event(tail_number, status, at=at, direction=direction)
    )
