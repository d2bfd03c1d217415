"""Tests for measura.core.money: currencies, FX rates and amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, localcontext

import pytest
from hypothesis import given
from hypothesis import strategies as st

from measura.core.errors import CurrencyConversionError
from measura.core.money import (
    MEASURA_DECIMAL_CONTEXT,
    Currency,
    CurrencyAmount,
    CurrencyPair,
    FxRate,
    MultiCurrencyAmount,
)
from measura.core.result import Err, Ok, unwrap
from measura.core.types import FrozenMap

USD = Currency("USD")
KRW = Currency("KRW")
EUR = Currency("EUR")

amounts = st.decimals(
    min_value=Decimal("-1000000"),
    max_value=Decimal("1000000"),
    places=6,
    allow_nan=False,
    allow_infinity=False,
)


class TestDecimalContext:
    def test_precision_is_28(self) -> None:
        assert MEASURA_DECIMAL_CONTEXT.prec == 28

    def test_rounding_is_half_even(self) -> None:
        assert MEASURA_DECIMAL_CONTEXT.rounding == ROUND_HALF_EVEN

    def test_traps_division_by_zero(self) -> None:
        with localcontext(MEASURA_DECIMAL_CONTEXT), pytest.raises(ArithmeticError):
            Decimal("1") / Decimal("0")


# ---------------------------------------------------------------------------
# Currency / CurrencyPair
# ---------------------------------------------------------------------------


class TestCurrency:
    def test_lowercase_rejected(self) -> None:
        with pytest.raises(TypeError):
            Currency("usd")

    def test_parse_normalises(self) -> None:
        assert Currency.parse(" usd ") == Ok(USD)

    def test_parse_rejects_digits(self) -> None:
        assert isinstance(Currency.parse("US1"), Err)

    def test_minor_units(self) -> None:
        assert USD.minor_units == 2
        assert KRW.minor_units == 0
        assert Currency("XYZ").minor_units == 2

    def test_ordering(self) -> None:
        assert sorted([USD, EUR, KRW]) == [EUR, KRW, USD]


class TestCurrencyPair:
    def test_same_currency_rejected(self) -> None:
        with pytest.raises(TypeError):
            CurrencyPair(USD, USD)

    def test_parse(self) -> None:
        assert unwrap(CurrencyPair.parse("USD/KRW")) == CurrencyPair(USD, KRW)

    @pytest.mark.parametrize("raw", ["USDKRW", "USD/USD", "USD/KR1", "A/B/C"])
    def test_parse_invalid(self, raw: str) -> None:
        assert isinstance(CurrencyPair.parse(raw), Err)

    def test_inverse(self) -> None:
        pair = CurrencyPair(USD, KRW)
        assert pair.inverse() == CurrencyPair(KRW, USD)
        assert pair.is_inverse(pair.inverse())

    def test_other(self) -> None:
        pair = CurrencyPair(USD, KRW)
        assert pair.other(USD) == KRW
        assert pair.other(KRW) == USD
        with pytest.raises(TypeError):
            pair.other(EUR)

    def test_str(self) -> None:
        assert str(CurrencyPair(USD, KRW)) == "USD/KRW"


# ---------------------------------------------------------------------------
# FxRate
# ---------------------------------------------------------------------------


class TestFxRate:
    def test_rate_must_be_positive(self) -> None:
        with pytest.raises(TypeError):
            FxRate.of("USD", "KRW", Decimal("0"))

    def test_direct_rate(self) -> None:
        rate = FxRate.of("USD", "KRW", Decimal("1350"))
        assert rate.fx_rate(USD, KRW) == Decimal("1350")

    def test_inverse_rate(self) -> None:
        rate = FxRate.of("USD", "KRW", Decimal("1350"))
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            expected = Decimal(1) / Decimal("1350")
        assert rate.fx_rate(KRW, USD) == expected

    def test_same_currency_is_one(self) -> None:
        assert FxRate.of("USD", "KRW", Decimal("1350")).fx_rate(EUR, EUR) == Decimal(1)

    def test_unrelated_currency_raises(self) -> None:
        with pytest.raises(CurrencyConversionError):
            FxRate.of("USD", "KRW", Decimal("1350")).fx_rate(EUR, USD)

    def test_inverse(self) -> None:
        inv = FxRate.of("EUR", "USD", Decimal("1.25")).inverse()
        assert inv.pair == CurrencyPair(USD, EUR)
        assert inv.rate == Decimal("0.8")


# ---------------------------------------------------------------------------
# CurrencyAmount / MultiCurrencyAmount
# ---------------------------------------------------------------------------


class TestCurrencyAmount:
    def test_nan_rejected(self) -> None:
        with pytest.raises(TypeError):
            CurrencyAmount(USD, Decimal("NaN"))

    def test_plus_currency_mismatch(self) -> None:
        with pytest.raises(TypeError):
            CurrencyAmount.of("USD", Decimal(1)).plus(CurrencyAmount.of("EUR", Decimal(1)))

    def test_minus(self) -> None:
        a = CurrencyAmount.of("USD", Decimal("10.5"))
        assert a.minus(CurrencyAmount.of("USD", Decimal("0.5"))) == CurrencyAmount.of("USD", Decimal("10.0"))

    def test_convert_to(self) -> None:
        rate = FxRate.of("USD", "KRW", Decimal("1350"))
        converted = CurrencyAmount.of("USD", Decimal("2")).convert_to(KRW, rate)
        assert converted == CurrencyAmount.of("KRW", Decimal("2700"))

    def test_convert_to_same_currency_is_identity(self) -> None:
        a = CurrencyAmount.of("USD", Decimal("2"))
        assert a.convert_to(USD, FxRate.of("USD", "KRW", Decimal("1350"))) is a

    def test_rounded_uses_minor_units(self) -> None:
        assert CurrencyAmount.of("KRW", Decimal("1234.5")).rounded().amount == Decimal("1234")
        assert CurrencyAmount.of("USD", Decimal("1.005")).rounded().amount == Decimal("1.00")

    def test_str(self) -> None:
        assert str(CurrencyAmount.of("USD", Decimal("1.50"))) == "USD 1.50"

    @given(a=amounts, b=amounts)
    def test_plus_commutative(self, a: Decimal, b: Decimal) -> None:
        x, y = CurrencyAmount(USD, a), CurrencyAmount(USD, b)
        assert x.plus(y) == y.plus(x)

    @given(a=amounts)
    def test_double_negation(self, a: Decimal) -> None:
        x = CurrencyAmount(USD, a)
        assert x.negated().negated() == x


class TestMultiCurrencyAmount:
    def test_of_sums_per_currency(self) -> None:
        mca = MultiCurrencyAmount.of(
            CurrencyAmount.of("USD", Decimal("1")),
            CurrencyAmount.of("KRW", Decimal("100")),
            CurrencyAmount.of("USD", Decimal("2")),
        )
        assert len(mca) == 2
        assert mca.amount(USD) == CurrencyAmount.of("USD", Decimal("3"))
        assert mca.currencies == (KRW, USD)

    def test_absent_currency_is_zero(self) -> None:
        assert MultiCurrencyAmount.of().amount(EUR) == CurrencyAmount.zero(EUR)

    def test_convert_to(self) -> None:
        mca = MultiCurrencyAmount.of(
            CurrencyAmount.of("USD", Decimal("-1.25")),
            CurrencyAmount.of("EUR", Decimal("1")),
        )
        total = mca.convert_to(USD, FxRate.of("EUR", "USD", Decimal("1.25")))
        assert total.currency == USD
        assert total.amount == Decimal("0")

    def test_plus_and_multiplied_by(self) -> None:
        mca = MultiCurrencyAmount.of(CurrencyAmount.of("USD", Decimal("1")))
        doubled = mca.plus(CurrencyAmount.of("USD", Decimal("1"))).multiplied_by(Decimal("3"))
        assert doubled.amount(USD).amount == Decimal("6")


class TestFrozenMap:
    def test_order_independent_equality(self) -> None:
        assert FrozenMap.of({"b": 1, "a": 2}) == FrozenMap.of([("a", 2), ("b", 1)])

    def test_non_comparable_keys_err(self) -> None:
        assert isinstance(FrozenMap.create({1: "a", "x": "b"}), Err)

    def test_lookup(self) -> None:
        m = FrozenMap.of({USD: Decimal(1)})
        assert m[USD] == Decimal(1)
        assert m.get(EUR) is None
        with pytest.raises(KeyError):
            m[EUR]

    def test_key_of_other_type_is_absent(self) -> None:
        m = FrozenMap.of({USD: Decimal(1), EUR: Decimal(2)})
        assert "USD" not in m
        assert m.get("USD", Decimal(0)) == Decimal(0)

    def test_lookup_past_last_key(self) -> None:
        m = FrozenMap.of({"a": 1, "c": 3})
        assert "b" not in m
        assert "d" not in m
        assert m["c"] == 3
