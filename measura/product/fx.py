"""FX index and non-deliverable forward products.

An NDF is cash settled in the settlement currency: on the payment date the
difference between the agreed rate and the index fixing is paid on the
settlement currency notional. Notional sign follows the convention
"positive receives the settlement currency notional".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import final

from measura.core.calendar import (
    EUTA,
    KRSE,
    AdjustableDate,
    DaysAdjustment,
    HolidayCalendarId,
)
from measura.core.money import Currency, CurrencyAmount, CurrencyPair, FxRate
from measura.core.reference_data import ReferenceData
from measura.core.result import Err, Ok
from measura.product.trade import TradeInfo

# ---------------------------------------------------------------------------
# FX index
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class FxIndex:
    """An FX rate fixing published for a currency pair.

    maturity_offset: fixing date -> maturity date (typically +2 business days).
    fixing_offset: maturity date -> fixing date (typically -2 business days).
    """

    name: str
    currency_pair: CurrencyPair
    fixing_calendar: HolidayCalendarId
    maturity_offset: DaysAdjustment = field(compare=False)
    fixing_offset: DaysAdjustment = field(compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise TypeError("FxIndex.name must be non-empty")

    @staticmethod
    def of(name: str, currency_pair: CurrencyPair, fixing_calendar: HolidayCalendarId, days: int = 2) -> FxIndex:
        return FxIndex(
            name=name,
            currency_pair=currency_pair,
            fixing_calendar=fixing_calendar,
            maturity_offset=DaysAdjustment.of_business_days(days, fixing_calendar),
            fixing_offset=DaysAdjustment.of_business_days(-days, fixing_calendar),
        )

    def resolve_maturity(self, fixing_date: date, ref_data: ReferenceData) -> date:
        return self.maturity_offset.adjust(fixing_date, ref_data)

    def resolve_fixing(self, maturity_date: date, ref_data: ReferenceData) -> date:
        return self.fixing_offset.adjust(maturity_date, ref_data)

    def __str__(self) -> str:
        return self.name


class FxIndices:
    """Commonly used FX indices."""

    USD_KRW_KFTC = FxIndex.of("USD/KRW-KFTC", CurrencyPair.of("USD", "KRW"), KRSE, days=1)
    EUR_USD_ECB = FxIndex.of("EUR/USD-ECB", CurrencyPair.of("EUR", "USD"), EUTA)


@final
@dataclass(frozen=True, slots=True)
class FxIndexObservation:
    """A single fixing of an FX index."""

    index: FxIndex
    fixing_date: date
    maturity_date: date

    @staticmethod
    def of(index: FxIndex, fixing_date: date, ref_data: ReferenceData) -> FxIndexObservation:
        return FxIndexObservation(
            index=index,
            fixing_date=fixing_date,
            maturity_date=index.resolve_maturity(fixing_date, ref_data),
        )

    @property
    def currency_pair(self) -> CurrencyPair:
        return self.index.currency_pair


# ---------------------------------------------------------------------------
# Non-deliverable forward
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class FxNdf:
    """FX non-deliverable forward.

    Enforced:
    - notional is non-zero
    - agreed rate pair equals the index pair in either order
    - settlement currency belongs to the pair
    """

    settlement_currency_notional: CurrencyAmount
    agreed_fx_rate: FxRate
    index: FxIndex
    payment_date: AdjustableDate

    def __post_init__(self) -> None:
        if self.settlement_currency_notional.is_zero():
            raise TypeError("FxNdf: settlement currency notional must be non-zero")
        pair = self.agreed_fx_rate.pair
        if pair != self.index.currency_pair and not pair.is_inverse(self.index.currency_pair):
            raise TypeError(
                f"FxNdf: agreed rate pair {pair} must match index pair {self.index.currency_pair}"
            )
        if not pair.contains(self.settlement_currency_notional.currency):
            raise TypeError(
                f"FxNdf: settlement currency {self.settlement_currency_notional.currency} "
                f"must be part of {pair}"
            )

    @staticmethod
    def create(
        notional: CurrencyAmount,
        agreed_fx_rate: FxRate,
        index: FxIndex,
        payment_date: date | AdjustableDate,
    ) -> Ok[FxNdf] | Err[str]:
        if notional.is_zero():
            return Err("FxNdf.settlement_currency_notional: must be non-zero")
        pair = agreed_fx_rate.pair
        if pair != index.currency_pair and not pair.is_inverse(index.currency_pair):
            return Err(f"FxNdf.agreed_fx_rate: pair {pair} does not match index {index}")
        if not pair.contains(notional.currency):
            return Err(f"FxNdf.settlement_currency_notional: {notional.currency} not in {pair}")
        adjustable = payment_date if isinstance(payment_date, AdjustableDate) else AdjustableDate(payment_date)
        return Ok(FxNdf(
            settlement_currency_notional=notional, agreed_fx_rate=agreed_fx_rate,
            index=index, payment_date=adjustable,
        ))

    @property
    def settlement_currency(self) -> Currency:
        return self.settlement_currency_notional.currency

    @property
    def non_deliverable_currency(self) -> Currency:
        return self.agreed_fx_rate.pair.other(self.settlement_currency)

    def resolve(self, ref_data: ReferenceData) -> ResolvedFxNdf:
        payment_date = self.payment_date.adjusted(ref_data)
        fixing_date = self.index.resolve_fixing(payment_date, ref_data)
        return ResolvedFxNdf(
            settlement_currency_notional=self.settlement_currency_notional,
            agreed_fx_rate=self.agreed_fx_rate,
            observation=FxIndexObservation.of(self.index, fixing_date, ref_data),
            payment_date=payment_date,
        )


@final
@dataclass(frozen=True, slots=True)
class ResolvedFxNdf:
    """An NDF with all dates adjusted, ready for pricing."""

    settlement_currency_notional: CurrencyAmount
    agreed_fx_rate: FxRate
    observation: FxIndexObservation
    payment_date: date

    @property
    def settlement_currency(self) -> Currency:
        return self.settlement_currency_notional.currency

    @property
    def non_deliverable_currency(self) -> Currency:
        return self.agreed_fx_rate.pair.other(self.settlement_currency)

    @property
    def settlement_notional(self) -> Decimal:
        return self.settlement_currency_notional.amount

    def agreed_rate(self) -> Decimal:
        """Agreed rate quoted as units of non-deliverable currency per settlement unit."""
        return self.agreed_fx_rate.fx_rate(self.settlement_currency, self.non_deliverable_currency)


@final
@dataclass(frozen=True, slots=True)
class FxNdfTrade:
    """A trade in an FxNdf."""

    info: TradeInfo
    product: FxNdf

    def resolve(self, ref_data: ReferenceData) -> ResolvedFxNdfTrade:
        return ResolvedFxNdfTrade(info=self.info, product=self.product.resolve(ref_data))


@final
@dataclass(frozen=True, slots=True)
class ResolvedFxNdfTrade:
    info: TradeInfo
    product: ResolvedFxNdf
