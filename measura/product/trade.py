"""Trade-level information and payments shared by every product."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, final

from measura.core.calendar import AdjustableDate
from measura.core.identifiers import StandardId
from measura.core.money import CurrencyAmount
from measura.core.reference_data import ReferenceData


@final
@dataclass(frozen=True, slots=True)
class TradeInfo:
    """Identifier and dates of a trade; every field is optional."""

    trade_id: StandardId | None = None
    trade_date: date | None = None
    settlement_date: date | None = None

    EMPTY: ClassVar[TradeInfo]  # Assigned after class definition

    def __post_init__(self) -> None:
        if (
            self.trade_date is not None
            and self.settlement_date is not None
            and self.settlement_date < self.trade_date
        ):
            raise TypeError(
                f"TradeInfo: settlement_date ({self.settlement_date}) "
                f"must be >= trade_date ({self.trade_date})"
            )


TradeInfo.EMPTY = TradeInfo()


@final
@dataclass(frozen=True, slots=True)
class Payment:
    """An amount paid on a known date. Positive is received."""

    value: CurrencyAmount
    payment_date: date


@final
@dataclass(frozen=True, slots=True)
class AdjustablePayment:
    """An amount paid on a date that is adjusted through reference data."""

    value: CurrencyAmount
    payment_date: AdjustableDate

    @staticmethod
    def of(value: CurrencyAmount, unadjusted: date) -> AdjustablePayment:
        return AdjustablePayment(value=value, payment_date=AdjustableDate(unadjusted))

    def resolve(self, ref_data: ReferenceData) -> Payment:
        return Payment(value=self.value, payment_date=self.payment_date.adjusted(ref_data))
