"""Error codes and the exceptions that carry them.

Two of the codes are recovered locally and only ever appear in
diagnostics (``INVALID_EVENT``, ``NEGATIVE_DURATION``). The rest abort
the operation and surface as ``ServiceError.code``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Error codes shared by the domain and service layers."""

    INVALID_EVENT = "INVALID_EVENT"
    NEGATIVE_DURATION = "NEGATIVE_DURATION"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    POLICY_OUT_OF_RANGE = "POLICY_OUT_OF_RANGE"
    INVALID_INPUT = "INVALID_INPUT"


class InvalidEventError(ValueError):
    """A raw status record cannot be turned into a StatusEvent."""

    code = ErrorCode.INVALID_EVENT

    def __init__(self, reason: str, *, tail_number: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.tail_number = tail_number


class PolicyOutOfRangeError(ValueError):
    """A CostPolicy field is outside its allowed bounds."""

    code = ErrorCode.POLICY_OUT_OF_RANGE

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]
