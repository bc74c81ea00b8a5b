"""Query view over reconstructed or priced sessions.

Filtering happens after pricing, on the full priced set, so narrowing
the view never moves a session into a different discount tier.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from flightlog.domain.sessions import FlightSession, SessionState

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

SORT_ORDERS = ("newest", "oldest", "tail")

T = TypeVar("T")


@dataclass(frozen=True)
class SessionView:
    """Filter and ordering options for a session listing."""

    tail: str | None = None
    search: str | None = None
    state: SessionState | None = None
    month: tuple[int, int] | None = None
    sort: str = "newest"
    limit: int | None = None

    @classmethod
    def build(
        cls,
        *,
        tail: str | None = None,
        search: str | None = None,
        state: str | None = None,
        month: str | None = None,
        sort: str = "newest",
        limit: int | None = None,
    ) -> SessionView:
        """Validate raw option values.

        Raises:
            ValueError: on an unknown state or sort order, a malformed
                month, or a negative limit.
        """
        parsed_state = SessionState(state) if state else None
        if sort not in SORT_ORDERS:
            msg = f"Unknown sort order {sort!r} (expected one of {', '.join(SORT_ORDERS)})"
            raise ValueError(msg)
        if limit is not None and limit < 0:
            msg = "limit cannot be negative"
            raise ValueError(msg)
        return cls(
            tail=tail.strip() if tail else None,
            search=search.strip().lower() if search else None,
            state=parsed_state,
            month=parse_month(month) if month else None,
            sort=sort,
            limit=limit,
        )

    def matches(self, session: FlightSession) -> bool:
        if self.tail and session.tail_number != self.tail:
            return False
        if self.search and self.search not in session.tail_number.lower():
            return False
        if self.state and session.state is not self.state:
            return False
        if self.month and (session.date.year, session.date.month) != self.month:
            return False
        return True


def parse_month(value: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month)``."""
    match = _MONTH_PATTERN.match(value.strip())
    if match is None:
        msg = f"Invalid month {value!r} (expected YYYY-MM)"
        raise ValueError(msg)
    year, month = int(match.group(1)), int(match.group(2))
    date(year, month, 1)  # raises ValueError for month 13 etc.
    return year, month


def apply_view(
    items: Sequence[T],
    view: SessionView,
    *,
    session_of: Callable[[T], FlightSession],
) -> list[T]:
    """Filter, sort, and truncate *items* according to *view*."""
    selected = [item for item in items if view.matches(session_of(item))]
    if view.sort == "tail":
        selected.sort(key=lambda item: (session_of(item).tail_number, session_of(item).started_at))
    else:
        selected.sort(
            key=lambda item: (session_of(item).started_at, session_of(item).tail_number),
            reverse=view.sort == "newest",
        )
    if view.limit is not None:
        selected = selected[: view.limit]
    return selected
