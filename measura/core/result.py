"""Result — Ok or Err, the return type of every fallible calculation step.

Per-measure outcomes are CalcResult[T] = Ok[T] | Err[Failure]: a measure
that cannot be calculated yields a Failure value rather than raising, so
one failing measure never hides the others for the same trade.
Smart constructors (create/parse) return Ok | Err[str].
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, NoReturn, final

from measura.core.errors import Failure, FailureError


@final
@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A calculated value."""

    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def bind[U, E](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Chain a further fallible step."""
        return f(self.value)

    def unwrap(self) -> T:
        return self.value


@final
@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed step; map and bind pass it through untouched."""

    error: E

    def map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def bind(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def unwrap(self) -> NoReturn:
        """Raise FailureError for a Failure payload, RuntimeError otherwise.

        Re-raising as FailureError keeps the FailureReason, so a caller that
        unwraps inside a measure routine reports the original reason.
        """
        if isinstance(self.error, Failure):
            raise FailureError(self.error)
        raise RuntimeError(f"Called unwrap on Err: {self.error}")


type Result[T, E] = Ok[T] | Err[E]

# Result of one measure: the value on success, a Failure otherwise.
type CalcResult[T] = Ok[T] | Err[Failure]


# ---------------------------------------------------------------------------
# Free functions
# ---------------------------------------------------------------------------


def unwrap[T](result: Ok[T] | Err[Any]) -> T:
    """Value of an Ok; RuntimeError on Err. For constructors known to succeed."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Err):
        raise RuntimeError(f"unwrap on Err: {result.error}")
    raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")


def map_result[T, U, E](result: Ok[T] | Err[E], f: Callable[[T], U]) -> Ok[U] | Err[E]:
    if isinstance(result, Ok):
        return Ok(f(result.value))
    return result


def sequence[T, E](results: Iterable[Ok[T] | Err[E]]) -> Ok[list[T]] | Err[E]:
    """All values as one Ok list, or the first Err encountered."""
    values: list[T] = []
    for r in results:
        if isinstance(r, Err):
            return r
        values.append(r.value)
    return Ok(values)


def is_success(result: Ok[Any] | Err[Any]) -> bool:
    return isinstance(result, Ok)


def is_failure(result: Ok[Any] | Err[Any]) -> bool:
    return isinstance(result, Err)


def result_of[T](fn: Callable[..., T], *args: Any) -> CalcResult[T]:
    """Run fn(*args) as one measure calculation.

    A FailureError keeps its own reason; any other Exception becomes
    FailureReason.ERROR carrying the exception text. BaseException
    (KeyboardInterrupt, task cancellation) propagates.
    """
    try:
        return Ok(fn(*args))
    except Exception as exc:  # noqa: BLE001
        return Err(Failure.from_exception(exc))
