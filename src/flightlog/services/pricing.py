"""PricingService — concession fees over the full reconstructed history.

The service holds an explicit :class:`CostPolicy`. It starts from the
``[pricing]`` config section and can be replaced with
:meth:`PricingService.set_policy` or adjusted with
:meth:`PricingService.configure`. Nothing reads pricing values from
global state.

INVARIANT: sessions are priced over the whole reconstructed set before
any view filter runs, so filtering never changes a session's tier.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from flightlog.domain.errors import ErrorCode, PolicyOutOfRangeError
from flightlog.domain.pricing import CostPolicy, cumulative_hours, price
from flightlog.domain.sessions import pair_events
from flightlog.infrastructure.store import SourceUnavailableError
from flightlog.services.base import BaseService
from flightlog.services.contracts import (
    CostsData,
    Diagnostics,
    PolicyData,
    PricedSessionItem,
    dump_validated,
)
from flightlog.services.result import ServiceResult
from flightlog.services.view import SessionView, apply_view

if TYPE_CHECKING:
    from flightlog.infrastructure.ledger import Ledger

logger = logging.getLogger(__name__)


class PricingService(BaseService):
    """Prices reconstructed sessions under a cost policy."""

    def __init__(self, ledger: Ledger, policy: CostPolicy | None = None) -> None:
        super().__init__(ledger)
        self._policy = policy

    # ------------------------------------------------------------------
    # policy — explicit value object
    # ------------------------------------------------------------------

    def get_policy(self) -> CostPolicy:
        """The policy in effect.

        Raises:
            PolicyOutOfRangeError: if the configured values are out of bounds.
        """
        if self._policy is None:
            self._policy = CostPolicy.from_flat(**self._ledger.settings.pricing.model_dump())
        return self._policy

    def set_policy(self, policy: CostPolicy) -> None:
        """Replace the policy used by later pricing calls."""
        self._policy = policy

    def configure(self, **overrides: Any) -> ServiceResult:
        """Override individual ``[pricing]`` values and adopt the result.

        Keys follow the flat config layout (``base_rate_per_hour``,
        ``tier1_discount_pct``, ...). ``None`` values are ignored.
        """
        op = "configure_policy"
        values = self._ledger.settings.pricing.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            policy = CostPolicy.from_flat(**values)
        except PolicyOutOfRangeError as exc:
            return _policy_failure(op, exc)
        except TypeError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, str(exc))
        self.set_policy(policy)
        return ServiceResult(ok=True, op=op, data=PolicyData.from_policy(policy).model_dump())

    def show_policy(self) -> ServiceResult:
        """Report the policy in effect."""
        op = "show_policy"
        try:
            policy = self.get_policy()
        except PolicyOutOfRangeError as exc:
            return _policy_failure(op, exc)
        return ServiceResult(ok=True, op=op, data=PolicyData.from_policy(policy).model_dump())

    # ------------------------------------------------------------------
    # price_sessions — the priced view
    # ------------------------------------------------------------------

    def price_sessions(
        self,
        *,
        policy: CostPolicy | None = None,
        tail: str | None = None,
        search: str | None = None,
        state: str | None = None,
        month: str | None = None,
        sort: str = "newest",
        limit: int | None = None,
        timeout: float | None = None,
    ) -> ServiceResult:
        """Reconstruct, price, then filter.

        ``total_cost`` and ``total_hours`` sum the filtered rows;
        ``cumulative_hours`` reports every aircraft in the full set.
        """
        op = "price_sessions"
        try:
            effective = policy if policy is not None else self.get_policy()
        except PolicyOutOfRangeError as exc:
            return _policy_failure(op, exc)

        try:
            view = SessionView.build(
                tail=tail, search=search, state=state, month=month, sort=sort, limit=limit
            )
        except ValueError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, str(exc))

        try:
            batch = self._load_events(timeout=timeout)
        except SourceUnavailableError as exc:
            return self._source_unavailable(op, exc)

        reconstruction = pair_events(batch.events)
        priced = price(reconstruction.sessions, effective)
        totals = cumulative_hours(reconstruction.sessions)
        logger.debug("Priced %d sessions across %d aircraft", len(priced), len(totals))

        selected = apply_view(priced, view, session_of=lambda p: p.session)
        diagnostics = Diagnostics.collect(batch.rejected, reconstruction.anomalies)
        data = dump_validated(
            CostsData,
            {
                "count": len(selected),
                "total": len(priced),
                "total_cost": sum(p.total_cost for p in selected),
                "total_hours": float(round(sum((p.flight_hours for p in selected), Decimal(0)), 2)),
                "cumulative_hours": {k: float(round(v, 2)) for k, v in sorted(totals.items())},
                "policy": PolicyData.from_policy(effective),
                "items": [PricedSessionItem.from_priced(p) for p in selected],
                "diagnostics": diagnostics,
            },
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=diagnostics.warnings())


def _policy_failure(op: str, exc: PolicyOutOfRangeError) -> ServiceResult:
    logger.debug("Rejected cost policy: %s", exc)
    return ServiceResult.failure(
        op,
        ErrorCode.POLICY_OUT_OF_RANGE,
        f"Cost policy out of range: {exc}",
        detail={"errors": exc.errors},
    )
