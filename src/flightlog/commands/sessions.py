"""Command: list reconstructed flight sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flightlog.commands._base import FlightlogCommand, view_options

if TYPE_CHECKING:
    from flightlog.commands._context import AppContext


@click.command(
    cls=FlightlogCommand,
    examples="""\
  flightlog sessions
  flightlog sessions --tail VT-ABC --sort oldest
  flightlog sessions --state in_progress
  flightlog --json sessions --month 2025-03 --limit 20""",
)
@view_options
@click.pass_obj
def sessions(
    app: AppContext,
    tail: str | None,
    search: str | None,
    state: str | None,
    month: str | None,
    sort: str,
    limit: int | None,
    timeout: float | None,
) -> None:
    """Reconstruct flight sessions from the event log."""
    from flightlog.services.sessions import SessionService

    result = SessionService(app.ledger).list_sessions(
        tail=tail,
        search=search,
        state=state,
        month=month,
        sort=sort,
        limit=limit,
        timeout=timeout,
    )
    app.emit(result)
