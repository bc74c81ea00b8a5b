"""SessionService — reconstructed flight sessions with diagnostics."""

from __future__ import annotations

import logging

from flightlog.domain.errors import ErrorCode
from flightlog.domain.sessions import pair_events
from flightlog.infrastructure.store import SourceUnavailableError
from flightlog.services.base import BaseService
from flightlog.services.contracts import Diagnostics, SessionItem, SessionListData, dump_validated
from flightlog.services.result import ServiceResult
from flightlog.services.view import SessionView, apply_view

logger = logging.getLogger(__name__)


class SessionService(BaseService):
    """Reconstructs flight sessions from the event log."""

    def list_sessions(
        self,
        *,
        tail: str | None = None,
        search: str | None = None,
        state: str | None = None,
        month: str | None = None,
        sort: str = "newest",
        limit: int | None = None,
        timeout: float | None = None,
    ) -> ServiceResult:
        """Reconstruct every session, then filter the listing.

        ``total`` counts all reconstructed sessions; ``count`` counts the
        rows left after filtering.
        """
        op = "list_sessions"
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
        for anomaly in reconstruction.anomalies:
            logger.warning("Refused negative-duration pairing for %s", anomaly.tail_number)

        selected = apply_view(reconstruction.sessions, view, session_of=lambda s: s)
        diagnostics = Diagnostics.collect(batch.rejected, reconstruction.anomalies)
        data = dump_validated(
            SessionListData,
            {
                "count": len(selected),
                "total": len(reconstruction.sessions),
                "items": [SessionItem.from_session(s) for s in selected],
                "diagnostics": diagnostics,
            },
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=diagnostics.warnings())
