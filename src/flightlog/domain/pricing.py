"""Concession fee pricing over reconstructed sessions.

Fee = (base rate × flight hours) × (1 − discount) × (1 + escalation)

The discount tier is chosen from the aircraft's *cumulative* hours over
every completed session in the priced set, not from the single session.
Pricing a subset of an aircraft's history can therefore land in a
different tier than pricing the whole of it. Callers that filter should
price first and filter afterwards.

All arithmetic is Decimal; the total is rounded half-up to whole
currency units and never drops below zero.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError, model_validator

from flightlog.domain.errors import PolicyOutOfRangeError
from flightlog.domain.sessions import FlightSession, SessionState

DEFAULT_BASE_RATE = Decimal("702")
DEFAULT_TIER1_DISCOUNT = Decimal("0.80")
DEFAULT_TIER2_DISCOUNT = Decimal("0.90")
DEFAULT_ESCALATION = Decimal("0.15")
TIER1_LOWER_HOURS = Decimal("3000")
TIER2_LOWER_HOURS = Decimal("8000")

MAX_ESCALATION = Decimal("10")


class DiscountTier(BaseModel):
    """A cumulative-hours band and the discount it earns."""

    model_config = {"frozen": True}

    lower_hours: Decimal = Field(ge=0)
    upper_hours: Decimal | None = None
    discount_pct: Decimal = Field(ge=0, le=1)

    @model_validator(mode="after")
    def _check_band(self) -> Self:
        if self.upper_hours is not None and self.upper_hours <= self.lower_hours:
            msg = "upper_hours must be greater than lower_hours"
            raise ValueError(msg)
        return self


class CostPolicy(BaseModel):
    """Explicit pricing configuration handed to :func:`price`.

    Discounts and escalation are fractions (``0.80`` means 80%).
    """

    model_config = {"frozen": True}

    base_rate_per_hour: Decimal = Field(default=DEFAULT_BASE_RATE, gt=0)
    tier1: DiscountTier = Field(
        default_factory=lambda: DiscountTier(
            lower_hours=TIER1_LOWER_HOURS,
            upper_hours=TIER2_LOWER_HOURS,
            discount_pct=DEFAULT_TIER1_DISCOUNT,
        )
    )
    tier2: DiscountTier = Field(
        default_factory=lambda: DiscountTier(
            lower_hours=TIER2_LOWER_HOURS,
            discount_pct=DEFAULT_TIER2_DISCOUNT,
        )
    )
    escalation_pct: Decimal = Field(default=DEFAULT_ESCALATION, ge=0, le=MAX_ESCALATION)

    @model_validator(mode="after")
    def _check_tiers(self) -> Self:
        if self.tier1.upper_hours is None:
            msg = "tier1 must have an upper bound"
            raise ValueError(msg)
        if self.tier1.upper_hours != self.tier2.lower_hours:
            msg = "tier1.upper_hours must equal tier2.lower_hours"
            raise ValueError(msg)
        if self.tier2.upper_hours is not None:
            msg = "tier2 is open-ended and cannot have an upper bound"
            raise ValueError(msg)
        if self.tier2.discount_pct < self.tier1.discount_pct:
            msg = "tier2 discount cannot be smaller than tier1 discount"
            raise ValueError(msg)
        return self

    @classmethod
    def build(cls, **values: Any) -> CostPolicy:
        """Validate *values* into a policy.

        Raises:
            PolicyOutOfRangeError: if any field is outside its bounds.
        """
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            errors = [_describe(err) for err in exc.errors()]
            raise PolicyOutOfRangeError("; ".join(errors), errors=errors) from exc

    @classmethod
    def from_flat(
        cls,
        *,
        base_rate_per_hour: Any = DEFAULT_BASE_RATE,
        tier1_lower_hours: Any = TIER1_LOWER_HOURS,
        tier1_discount_pct: Any = DEFAULT_TIER1_DISCOUNT,
        tier2_lower_hours: Any = TIER2_LOWER_HOURS,
        tier2_discount_pct: Any = DEFAULT_TIER2_DISCOUNT,
        escalation_pct: Any = DEFAULT_ESCALATION,
    ) -> CostPolicy:
        """Build a policy from the flat ``[pricing]`` config layout."""
        return cls.build(
            base_rate_per_hour=base_rate_per_hour,
            tier1={
                "lower_hours": tier1_lower_hours,
                "upper_hours": tier2_lower_hours,
                "discount_pct": tier1_discount_pct,
            },
            tier2={"lower_hours": tier2_lower_hours, "discount_pct": tier2_discount_pct},
            escalation_pct=escalation_pct,
        )


def _describe(err: Any) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = str(err.get("msg", "invalid value"))
    return f"{loc}: {msg}" if loc else msg


@dataclass(frozen=True)
class PricedSession:
    """A flight session with its concession fee."""

    session: FlightSession
    flight_hours: Decimal
    cumulative_hours: Decimal
    discount_pct: Decimal
    base_cost: Decimal
    total_cost: int

    @property
    def tail_number(self) -> str:
        return self.session.tail_number

    @property
    def state(self) -> SessionState:
        return self.session.state


def cumulative_hours(sessions: Iterable[FlightSession]) -> dict[str, Decimal]:
    """Total completed hours per tail number across *sessions*."""
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for session in sessions:
        if session.state is SessionState.COMPLETED:
            totals[session.tail_number] += session.flight_hours
        else:
            totals.setdefault(session.tail_number, Decimal(0))
    return dict(totals)


def discount_for(hours: Decimal, policy: CostPolicy) -> Decimal:
    """Discount fraction earned by an aircraft with *hours* cumulative hours.

    Bands are lower-exclusive and upper-inclusive: exactly 3000 hours
    earns nothing, exactly 8000 hours stays in the first tier.
    """
    if hours > policy.tier2.lower_hours:
        return policy.tier2.discount_pct
    if hours > policy.tier1.lower_hours:
        return policy.tier1.discount_pct
    return Decimal(0)


def session_cost(flight_hours: Decimal, discount: Decimal, policy: CostPolicy) -> int:
    """Rounded fee for *flight_hours* at a given *discount*."""
    cost = policy.base_rate_per_hour * flight_hours
    cost *= Decimal(1) - discount
    cost *= Decimal(1) + policy.escalation_pct
    rounded = int(cost.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return max(rounded, 0)


def price(sessions: Sequence[FlightSession], policy: CostPolicy) -> list[PricedSession]:
    """Price every session, tiering each aircraft on the whole supplied set."""
    totals = cumulative_hours(sessions)
    priced: list[PricedSession] = []
    for session in sessions:
        hours = session.flight_hours
        aggregate = totals.get(session.tail_number, Decimal(0))
        discount = discount_for(aggregate, policy)
        priced.append(
            PricedSession(
                session=session,
                flight_hours=hours,
                cumulative_hours=aggregate,
                discount_pct=discount,
                base_cost=policy.base_rate_per_hour * hours,
                total_cost=session_cost(hours, discount, policy),
            )
        )
    return priced
