"""Tests for measura.core.result and measura.core.errors."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from measura.core.errors import (
    CurrencyConversionError,
    Failure,
    FailureError,
    FailureReason,
    MarketDataNotFoundError,
    MissingParameterError,
)
from measura.core.result import Err, Ok, is_failure, is_success, map_result, result_of, sequence, unwrap

# ---------------------------------------------------------------------------
# Ok / Err
# ---------------------------------------------------------------------------


class TestOk:
    def test_map(self) -> None:
        assert Ok(2).map(lambda x: x * 3) == Ok(6)

    def test_bind(self) -> None:
        assert Ok(2).bind(lambda x: Ok(x + 1)) == Ok(3)
        assert Ok(2).bind(lambda x: Err("no")) == Err("no")

    def test_unwrap(self) -> None:
        assert Ok(1).unwrap() == 1


class TestErr:
    def test_map_is_noop(self) -> None:
        err: Err[str] = Err("bad")
        assert err.map(lambda x: x) is err

    def test_bind_short_circuits(self) -> None:
        err: Err[str] = Err("bad")
        assert err.bind(lambda x: Ok(x)) is err

    def test_unwrap_failure_raises_failure_error(self) -> None:
        failure = Failure.of(FailureReason.MISSING_DATA, "No curve")
        with pytest.raises(FailureError) as info:
            Err(failure).unwrap()
        assert info.value.failure is failure

    def test_unwrap_other_raises_runtime_error(self) -> None:
        with pytest.raises(RuntimeError):
            Err("bad").unwrap()


class TestFreeFunctions:
    def test_unwrap_ok(self) -> None:
        assert unwrap(Ok(3)) == 3

    def test_unwrap_err_raises(self) -> None:
        with pytest.raises(RuntimeError):
            unwrap(Err("x"))

    def test_map_result(self) -> None:
        assert map_result(Ok(1), lambda x: x + 1) == Ok(2)
        assert map_result(Err("e"), lambda x: x + 1) == Err("e")

    def test_sequence_short_circuits(self) -> None:
        assert sequence([Ok(1), Ok(2)]) == Ok([1, 2])
        assert sequence([Ok(1), Err("first"), Err("second")]) == Err("first")

    def test_is_success(self) -> None:
        assert is_success(Ok(1)) and not is_success(Err(1))
        assert is_failure(Err(1)) and not is_failure(Ok(1))

    @given(st.integers())
    def test_map_identity(self, x: int) -> None:
        assert Ok(x).map(lambda v: v) == Ok(x)


# ---------------------------------------------------------------------------
# result_of: the per-measure isolating boundary
# ---------------------------------------------------------------------------


class TestResultOf:
    def test_value_is_wrapped(self) -> None:
        assert result_of(lambda a, b: a + b, 1, 2) == Ok(3)

    def test_plain_exception_becomes_error_failure(self) -> None:
        def boom() -> None:
            raise ValueError("division went wrong")

        result = result_of(boom)
        assert isinstance(result, Err)
        assert result.error.reason is FailureReason.ERROR
        assert result.error.message == "division went wrong"
        assert result.error.source == "ValueError"

    def test_failure_error_keeps_reason(self) -> None:
        def missing() -> None:
            raise MarketDataNotFoundError("No market data found for 'Default/USD'")

        result = result_of(missing)
        assert isinstance(result, Err)
        assert result.error.reason is FailureReason.MISSING_DATA

    def test_exception_without_message_uses_type_name(self) -> None:
        def boom() -> None:
            raise KeyError

        result = result_of(boom)
        assert isinstance(result, Err)
        assert result.error.message == "KeyError"

    def test_base_exception_propagates(self) -> None:
        def interrupted() -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            result_of(interrupted)


# ---------------------------------------------------------------------------
# Failure
# ---------------------------------------------------------------------------


class TestFailure:
    def test_of_fills_placeholders(self) -> None:
        f = Failure.of(FailureReason.INVALID_INPUT, "Unsupported measure: {}", "PV01")
        assert f.message == "Unsupported measure: PV01"
        assert f.reason is FailureReason.INVALID_INPUT

    def test_surplus_args_are_appended(self) -> None:
        f = Failure.of(FailureReason.OTHER, "Failed: {}", "a", "b")
        assert f.message == "Failed: a - [b]"

    def test_missing_args_leave_placeholder(self) -> None:
        f = Failure.of(FailureReason.OTHER, "{} and {}", "a")
        assert f.message == "a and {}"

    def test_with_context(self) -> None:
        f = Failure.of(FailureReason.ERROR, "boom").with_context("PV01")
        assert f.message == "PV01: boom"

    def test_to_dict(self) -> None:
        f = Failure(reason=FailureReason.MISSING_DATA, message="m", source="s")
        assert f.to_dict() == {"reason": "MissingData", "message": "m", "source": "s"}

    def test_from_exception(self) -> None:
        f = Failure.from_exception(ZeroDivisionError("division by zero"))
        assert f.reason is FailureReason.ERROR
        assert f.source == "ZeroDivisionError"


class TestFailureError:
    def test_subclass_reason_from_string(self) -> None:
        exc = MissingParameterError("Calculation parameter not found")
        assert exc.failure.reason is FailureReason.INVALID_INPUT
        assert exc.failure.source == "MissingParameterError"
        assert str(exc) == "Calculation parameter not found"

    def test_wraps_failure_value(self) -> None:
        failure = Failure.of(FailureReason.NOT_APPLICABLE, "n/a")
        assert FailureError(failure).failure is failure

    def test_currency_conversion_reason(self) -> None:
        assert CurrencyConversionError("x").failure.reason is FailureReason.CURRENCY_CONVERSION
