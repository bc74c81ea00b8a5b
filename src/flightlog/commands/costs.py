"""Command: price flight sessions under the cost policy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from flightlog.commands._base import FlightlogCommand, view_options

if TYPE_CHECKING:
    from flightlog.commands._context import AppContext


@click.command(
    cls=FlightlogCommand,
    examples="""\
  flightlog costs
  flightlog costs --month 2025-03
  flightlog costs --tail VT-ABC --rate 750
  flightlog costs --tier1-discount 0.7 --escalation 0.1
  flightlog --json costs --state completed""",
)
@view_options
@click.option("--rate", default=None, type=float, help="Base rate per flight hour.")
@click.option("--tier1-discount", default=None, type=float, help="Discount fraction, tier 1.")
@click.option("--tier2-discount", default=None, type=float, help="Discount fraction, tier 2.")
@click.option("--escalation", default=None, type=float, help="Escalation fraction.")
@click.pass_obj
def costs(
    app: AppContext,
    tail: str | None,
    search: str | None,
    state: str | None,
    month: str | None,
    sort: str,
    limit: int | None,
    timeout: float | None,
    rate: float | None,
    tier1_discount: float | None,
    tier2_discount: float | None,
    escalation: float | None,
) -> None:
    """Price every session; discounts follow each aircraft's total hours."""
    from flightlog.services.pricing import PricingService

    svc = PricingService(app.ledger)
    overrides = {
        "base_rate_per_hour": rate,
        "tier1_discount_pct": tier1_discount,
        "tier2_discount_pct": tier2_discount,
        "escalation_pct": escalation,
    }
    if any(value is not None for value in overrides.values()):
        configured = svc.configure(**overrides)
        if not configured.ok:
            app.emit(configured)
            return

    result = svc.price_sessions(
        tail=tail,
        search=search,
        state=state,
        month=month,
        sort=sort,
        limit=limit,
        timeout=timeout,
    )
    app.emit(result)
