"""Failure values and the exceptions that carry them.

A Failure is a frozen value that can be pattern-matched, serialized and
stored in a result mapping. Per-measure problems are returned as
Err(Failure); problems common to every measure of a call (missing
configuration, unresolvable trade) are raised as FailureError subclasses
and abort the call.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import final


class FailureReason(Enum):
    """Why a calculation failed."""

    INVALID_INPUT = "InvalidInput"
    CALCULATION_FAILED = "CalculationFailed"
    MISSING_DATA = "MissingData"
    CURRENCY_CONVERSION = "CurrencyConversion"
    NOT_APPLICABLE = "NotApplicable"
    UNSUPPORTED = "Unsupported"
    MULTIPLE = "Multiple"
    ERROR = "Error"
    OTHER = "Other"


def _format_message(template: str, args: tuple[object, ...]) -> str:
    """Substitute '{}' placeholders in order; surplus args are appended."""
    parts = template.split("{}")
    out = [parts[0]]
    remaining = list(args)
    for part in parts[1:]:
        out.append(str(remaining.pop(0)) if remaining else "{}")
        out.append(part)
    msg = "".join(out)
    if remaining:
        msg += " - [" + ", ".join(str(a) for a in remaining) + "]"
    return msg


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """Reason and message for a failed calculation."""

    reason: FailureReason
    message: str
    source: str = ""  # exception type or "module.function" that produced this

    @staticmethod
    def of(reason: FailureReason, template: str, *args: object) -> Failure:
        """Create a Failure, filling '{}' placeholders from args."""
        return Failure(reason=reason, message=_format_message(template, args))

    @staticmethod
    def from_exception(exc: BaseException) -> Failure:
        """Convert an exception into a Failure.

        FailureError keeps its embedded failure; anything else is ERROR.
        """
        if isinstance(exc, FailureError):
            return exc.failure
        message = str(exc) or type(exc).__name__
        return Failure(reason=FailureReason.ERROR, message=message, source=type(exc).__name__)

    def with_context(self, context: str) -> Failure:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable keys."""
        return {
            "reason": self.reason.value,
            "message": self.message,
            "source": self.source,
        }


# ---------------------------------------------------------------------------
# Exceptions: raised where a failure must propagate
# ---------------------------------------------------------------------------


class FailureError(Exception):
    """Exception wrapping a Failure value."""

    reason: FailureReason = FailureReason.ERROR

    def __init__(self, failure: Failure | str) -> None:
        if isinstance(failure, str):
            failure = Failure(
                reason=type(self).reason, message=failure, source=type(self).__name__,
            )
        super().__init__(failure.message)
        self.failure = failure


class MissingParameterError(FailureError):
    """A required calculation parameter is absent (configuration error)."""

    reason = FailureReason.INVALID_INPUT


class ReferenceDataNotFoundError(FailureError):
    """An identifier could not be found in the reference data."""

    reason = FailureReason.MISSING_DATA


class MarketDataNotFoundError(FailureError):
    """A market data value was not available or not declared."""

    reason = FailureReason.MISSING_DATA


class CurrencyConversionError(FailureError):
    """An amount could not be converted between currencies."""

    reason = FailureReason.CURRENCY_CONVERSION


class CalculationCancelledError(Exception):
    """The caller cancelled a calculation before it completed.

    Not a FailureError: it is never captured into a result mapping.
    """
