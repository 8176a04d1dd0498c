"""Typed outcomes for external calls.

Every upstream request is run through `call`, which turns an exception into a
failed `CallResult` instead of letting it escape. The caller then decides,
per call site, whether a failure is absorbed (logged, replaced by a fallback
value) or propagated (re-raised).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from org_contributions.errors import ContributionsError

T = TypeVar("T")


class Disposition(str, Enum):
    """What the caller does with a failed call."""

    ABSORB = "absorb"
    PROPAGATE = "propagate"


class FailureKind(str, Enum):
    """Why a call failed."""

    HTTP_STATUS = "http_status"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class CallFailure:
    kind: FailureKind
    message: str
    error: ContributionsError


@dataclass(frozen=True, slots=True)
class CallResult(Generic[T]):
    """Either a value or a failure, never both."""

    value: T | None = None
    failure: CallFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        """Return the value, re-raising the original error on failure."""

        if self.failure is not None:
            raise self.failure.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.failure is not None else self.value  # type: ignore[return-value]


def classify(error: ContributionsError) -> FailureKind:
    if error.status_code is not None:
        return FailureKind.HTTP_STATUS
    return FailureKind.TRANSPORT


def call(fn: Callable[[], T]) -> CallResult[T]:
    """Run ``fn`` and capture client errors as a failed result.

    Only `ContributionsError` is captured; anything else is a bug and still
    raises.
    """

    try:
        return CallResult(value=fn())
    except ContributionsError as e:
        return CallResult(failure=CallFailure(kind=classify(e), message=str(e), error=e))
