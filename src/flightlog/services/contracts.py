"""Typed payload contracts for service results.

These models validate operation payload shapes before they leave the
service layer, and hold the conversions from domain objects (Decimal,
datetime) to JSON-friendly values.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from flightlog.domain.events import RejectedRecord
from flightlog.domain.pricing import CostPolicy, PricedSession
from flightlog.domain.sessions import FlightSession, NegativeDurationAnomaly


T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


def _hours(value: Decimal) -> float:
    return float(round(value, 2))


class RejectedItem(BaseModel):
    """One raw record excluded by validation."""

    index: int
    reason: str
    tail_number: str | None = None


class AnomalyItem(BaseModel):
    """One refused departure/arrival pairing."""

    tail_number: str
    outbound: str
    inbound: str


class Diagnostics(BaseModel):
    """Recovered problems met while building sessions."""

    rejected: int = 0
    rejected_records: list[RejectedItem] = Field(default_factory=list)
    negative_durations: int = 0
    anomalies: list[AnomalyItem] = Field(default_factory=list)

    @classmethod
    def collect(
        cls,
        rejected: list[RejectedRecord],
        anomalies: list[NegativeDurationAnomaly],
    ) -> Diagnostics:
        return cls(
            rejected=len(rejected),
            rejected_records=[
                RejectedItem(index=r.index, reason=r.reason, tail_number=r.tail_number)
                for r in rejected
            ],
            negative_durations=len(anomalies),
            anomalies=[
                AnomalyItem(
                    tail_number=a.tail_number,
                    outbound=a.outbound.isoformat(),
                    inbound=a.inbound.isoformat(),
                )
                for a in anomalies
            ],
        )

    def warnings(self) -> list[str]:
        """Human-readable warning lines for the CLI."""
        lines = [
            f"Rejected record #{r.index}"
            + (f" ({r.tail_number})" if r.tail_number else "")
            + f": {r.reason}"
            for r in self.rejected_records
        ]
        lines.extend(
            f"Refused pairing for {a.tail_number}: arrival {a.inbound} precedes "
            f"departure {a.outbound}"
            for a in self.anomalies
        )
        return lines


class SessionItem(BaseModel):
    """One reconstructed session."""

    model_config = ConfigDict(extra="allow")

    tail_number: str
    date: str
    state: str
    outbound: str | None = None
    inbound: str | None = None
    duration_minutes: int | None = None
    duration: str

    @classmethod
    def from_session(cls, session: FlightSession) -> SessionItem:
        return cls(
            tail_number=session.tail_number,
            date=session.date.isoformat(),
            state=str(session.state),
            outbound=session.outbound.isoformat() if session.outbound else None,
            inbound=session.inbound.isoformat() if session.inbound else None,
            duration_minutes=session.duration_minutes,
            duration=session.duration_label,
        )


class SessionListData(BaseModel):
    """Payload contract for ``SessionService.list_sessions``."""

    count: int
    total: int
    items: list[SessionItem]
    diagnostics: Diagnostics


class PricedSessionItem(SessionItem):
    """One session with its fee."""

    flight_hours: float
    cumulative_hours: float
    discount_pct: float
    base_cost: float
    total_cost: int

    @classmethod
    def from_priced(cls, priced: PricedSession) -> PricedSessionItem:
        base = SessionItem.from_session(priced.session).model_dump()
        return cls(
            **base,
            flight_hours=_hours(priced.flight_hours),
            cumulative_hours=_hours(priced.cumulative_hours),
            discount_pct=float(priced.discount_pct),
            base_cost=float(round(priced.base_cost, 2)),
            total_cost=priced.total_cost,
        )


class PolicyData(BaseModel):
    """Flat view of a CostPolicy."""

    base_rate_per_hour: float
    tier1_lower_hours: float
    tier1_upper_hours: float
    tier1_discount_pct: float
    tier2_lower_hours: float
    tier2_discount_pct: float
    escalation_pct: float

    @classmethod
    def from_policy(cls, policy: CostPolicy) -> PolicyData:
        return cls(
            base_rate_per_hour=float(policy.base_rate_per_hour),
            tier1_lower_hours=float(policy.tier1.lower_hours),
            tier1_upper_hours=float(policy.tier1.upper_hours or policy.tier2.lower_hours),
            tier1_discount_pct=float(policy.tier1.discount_pct),
            tier2_lower_hours=float(policy.tier2.lower_hours),
            tier2_discount_pct=float(policy.tier2.discount_pct),
            escalation_pct=float(policy.escalation_pct),
        )


class CostsData(BaseModel):
    """Payload contract for ``PricingService.price_sessions``."""

    count: int
    total: int
    total_cost: int
    total_hours: float
    cumulative_hours: dict[str, float]
    policy: PolicyData
    items: list[PricedSessionItem]
    diagnostics: Diagnostics
