"""Discounting pricers for bills and bill trades.

The notional is discounted on the issuer curve; an unsettled purchase is
discounted on the repo curve. Flows falling on the valuation date are
still included in present value and are reported as current cash.
"""

from __future__ import annotations

from typing import ClassVar, final

from measura.core.money import CurrencyAmount, MultiCurrencyAmount
from measura.market.legal_entity import LegalEntityDiscountingProvider
from measura.product.bill import ResolvedBill, ResolvedBillTrade
from measura.product.trade import Payment


@final
class DiscountingBillProductPricer:
    """Present value of one bill."""

    def present_value(self, bill: ResolvedBill, provider: LegalEntityDiscountingProvider) -> CurrencyAmount:
        if provider.valuation_date > bill.notional.payment_date:
            return CurrencyAmount.zero(bill.currency)
        curve = provider.issuer_curve(bill.legal_entity_id, bill.currency)
        df = curve.discount_factor(bill.notional.payment_date)
        return bill.notional.value.multiplied_by(df)


@final
class DiscountingBillTradePricer:
    """Present value, cash and exposure of a bill trade."""

    DEFAULT: ClassVar[DiscountingBillTradePricer]  # Assigned after class definition

    def __init__(self, product_pricer: DiscountingBillProductPricer | None = None) -> None:
        self._product_pricer = product_pricer or DiscountingBillProductPricer()

    def _settlement_value(self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider) -> CurrencyAmount:
        settlement: Payment | None = trade.settlement
        currency = trade.product.currency
        if settlement is None or provider.valuation_date > settlement.payment_date:
            return CurrencyAmount.zero(currency)
        curve = provider.repo_curve(trade.product.legal_entity_id, currency)
        return settlement.value.multiplied_by(curve.discount_factor(settlement.payment_date))

    def present_value(self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider) -> CurrencyAmount:
        product_pv = self._product_pricer.present_value(trade.product, provider)
        position = product_pv.multiplied_by(trade.quantity)
        return position.plus(self._settlement_value(trade, provider))

    def currency_exposure(self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider) -> MultiCurrencyAmount:
        return MultiCurrencyAmount.of(self.present_value(trade, provider))

    def current_cash(self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider) -> CurrencyAmount:
        valuation_date = provider.valuation_date
        cash = CurrencyAmount.zero(trade.product.currency)
        if trade.settlement is not None and trade.settlement.payment_date == valuation_date:
            cash = cash.plus(trade.settlement.value)
        if trade.product.notional.payment_date == valuation_date:
            cash = cash.plus(trade.product.notional.value.multiplied_by(trade.quantity))
        return cash


DiscountingBillTradePricer.DEFAULT = DiscountingBillTradePricer()
