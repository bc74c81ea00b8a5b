"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, flightlog.toml only contains
overrides. Pricing values are not range-checked at this level; they are
validated when a CostPolicy is built from them.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

# --- flightlog.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    db_name: str = "flightlog.db"
    fetch_timeout: float = 10.0


class PricingConfig(BaseModel):
    """[pricing] section — fractions, not percentages."""

    model_config = {"frozen": True}

    base_rate_per_hour: Decimal = Decimal("702")
    tier1_lower_hours: Decimal = Decimal("3000")
    tier1_discount_pct: Decimal = Decimal("0.80")
    tier2_lower_hours: Decimal = Decimal("8000")
    tier2_discount_pct: Decimal = Decimal("0.90")
    escalation_pct: Decimal = Decimal("0.15")


