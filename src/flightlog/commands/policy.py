"""Command: show the cost policy in effect."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flightlog.commands._base import FlightlogCommand

if TYPE_CHECKING:
    from flightlog.commands._context import AppContext


@click.command(
    cls=FlightlogCommand,
    examples="""\
  flightlog policy
  flightlog --json policy
  FLIGHTLOG_PRICING__BASE_RATE_PER_HOUR=750 flightlog policy""",
)
@click.pass_obj
def policy(app: AppContext) -> None:
    """Show the cost policy built from config, env, and defaults."""
    from flightlog.services.pricing import PricingService

    app.emit(PricingService(app.ledger).show_policy())
