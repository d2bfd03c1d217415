"""Bills: zero-coupon securities paying their notional at maturity.

Prices and yields are decimals: a price of 99.32% is 0.9932 and a yield
of 1.32% is 0.0132.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from enum import Enum
from typing import assert_never, final

from measura.core.calendar import DayCount, DaysAdjustment
from measura.core.identifiers import StandardId
from measura.core.money import MEASURA_DECIMAL_CONTEXT, Currency, CurrencyAmount
from measura.core.reference_data import ReferenceData
from measura.core.result import Err, Ok
from measura.product.trade import AdjustablePayment, Payment, TradeInfo

_ONE = Decimal("1")


class BillYieldConvention(Enum):
    """How a bill's yield converts to and from its price."""

    DISCOUNT = "Discount"
    FRENCH_CD = "French-CD"
    INTEREST_AT_MATURITY = "Interest-At-Maturity"
    JAPAN_BILLS = "Japan-Bills"

    def price_from_yield(self, yield_: Decimal, accrual_factor: Decimal) -> Decimal:
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            match self:
                case BillYieldConvention.DISCOUNT:
                    return _ONE - accrual_factor * yield_
                case (
                    BillYieldConvention.FRENCH_CD
                    | BillYieldConvention.INTEREST_AT_MATURITY
                    | BillYieldConvention.JAPAN_BILLS
                ):
                    return _ONE / (_ONE + accrual_factor * yield_)
                case _never:
                    assert_never(_never)

    def yield_from_price(self, price: Decimal, accrual_factor: Decimal) -> Decimal:
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            match self:
                case BillYieldConvention.DISCOUNT:
                    return (_ONE - price) / accrual_factor
                case (
                    BillYieldConvention.FRENCH_CD
                    | BillYieldConvention.INTEREST_AT_MATURITY
                    | BillYieldConvention.JAPAN_BILLS
                ):
                    return (_ONE / price - _ONE) / accrual_factor
                case _never:
                    assert_never(_never)


@final
@dataclass(frozen=True, slots=True)
class Bill:
    """A bill security.

    Enforced:
    - notional amount is strictly positive
    - settlement date offset is non-negative
    """

    security_id: StandardId
    notional: AdjustablePayment
    day_count: DayCount
    yield_convention: BillYieldConvention
    legal_entity_id: StandardId
    settlement_date_offset: DaysAdjustment

    def __post_init__(self) -> None:
        if self.settlement_date_offset.days < 0:
            raise TypeError("Bill: the settlement date offset must be non-negative")
        if self.notional.value.amount <= 0:
            raise TypeError("Bill: notional must be strictly positive")

    @staticmethod
    def create(
        security_id: StandardId,
        notional: AdjustablePayment,
        day_count: DayCount,
        yield_convention: BillYieldConvention,
        legal_entity_id: StandardId,
        settlement_date_offset: DaysAdjustment,
    ) -> Ok[Bill] | Err[str]:
        if settlement_date_offset.days < 0:
            return Err(f"Bill.settlement_date_offset: must be non-negative, got {settlement_date_offset.days}")
        if notional.value.amount <= 0:
            return Err(f"Bill.notional: must be strictly positive, got {notional.value.amount}")
        return Ok(Bill(
            security_id=security_id, notional=notional, day_count=day_count,
            yield_convention=yield_convention, legal_entity_id=legal_entity_id,
            settlement_date_offset=settlement_date_offset,
        ))

    @property
    def currency(self) -> Currency:
        return self.notional.value.currency

    def _accrual_factor(self, settlement_date: date) -> Decimal:
        return self.day_count.relative_year_fraction(settlement_date, self.notional.payment_date.unadjusted)

    def price_from_yield(self, yield_: Decimal, settlement_date: date) -> Decimal:
        return self.yield_convention.price_from_yield(yield_, self._accrual_factor(settlement_date))

    def yield_from_price(self, price: Decimal, settlement_date: date) -> Decimal:
        return self.yield_convention.yield_from_price(price, self._accrual_factor(settlement_date))

    def resolve(self, ref_data: ReferenceData) -> ResolvedBill:
        return ResolvedBill(
            security_id=self.security_id,
            notional=self.notional.resolve(ref_data),
            day_count=self.day_count,
            yield_convention=self.yield_convention,
            legal_entity_id=self.legal_entity_id,
            settlement_date_offset=self.settlement_date_offset,
        )


@final
@dataclass(frozen=True, slots=True)
class ResolvedBill:
    """A bill with its maturity date adjusted, ready for pricing."""

    security_id: StandardId
    notional: Payment
    day_count: DayCount
    yield_convention: BillYieldConvention
    legal_entity_id: StandardId
    settlement_date_offset: DaysAdjustment

    @property
    def currency(self) -> Currency:
        return self.notional.value.currency

    def price_from_yield(self, yield_: Decimal, settlement_date: date) -> Decimal:
        af = self.day_count.relative_year_fraction(settlement_date, self.notional.payment_date)
        return self.yield_convention.price_from_yield(yield_, af)

    def yield_from_price(self, price: Decimal, settlement_date: date) -> Decimal:
        af = self.day_count.relative_year_fraction(settlement_date, self.notional.payment_date)
        return self.yield_convention.yield_from_price(price, af)


@final
@dataclass(frozen=True, slots=True)
class BillTrade:
    """A trade in a bill: quantity of bills bought at a clean price."""

    info: TradeInfo
    product: Bill
    quantity: Decimal
    price: Decimal

    def resolve(self, ref_data: ReferenceData) -> ResolvedBillTrade:
        """Resolve the product and the settlement payment.

        The settlement date is the trade's settlement date, or the trade date
        shifted by the bill's settlement offset. Without either there is no
        settlement.
        """
        settlement_date = self.info.settlement_date
        if settlement_date is None and self.info.trade_date is not None:
            settlement_date = self.product.settlement_date_offset.adjust(self.info.trade_date, ref_data)
        settlement = None
        if settlement_date is not None:
            with localcontext(MEASURA_DECIMAL_CONTEXT):
                amount = -self.quantity * self.price * self.product.notional.value.amount
            settlement = Payment(
                value=CurrencyAmount(self.product.currency, amount),
                payment_date=settlement_date,
            )
        return ResolvedBillTrade(
            info=self.info,
            product=self.product.resolve(ref_data),
            quantity=self.quantity,
            settlement=settlement,
        )


@final
@dataclass(frozen=True, slots=True)
class ResolvedBillTrade:
    info: TradeInfo
    product: ResolvedBill
    quantity: Decimal
    settlement: Payment | None
