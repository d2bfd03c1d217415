"""Discounting pricer for FX non-deliverable forwards.

PV = N * (DF_settle(T) - agreed * fx(other -> settle) * DF_other(T))

where N is the settlement currency notional, agreed is the agreed rate in
units of the non-deliverable currency per settlement unit and T is the
payment date. Once the payment date has passed the value is zero.
"""

from __future__ import annotations

from decimal import localcontext
from typing import ClassVar, final

from measura.core.money import MEASURA_DECIMAL_CONTEXT, CurrencyAmount, FxRate, MultiCurrencyAmount
from measura.market.rates import RatesProvider
from measura.product.fx import ResolvedFxNdf


@final
class DiscountingFxNdfProductPricer:
    """Prices a ResolvedFxNdf against a single-scenario RatesProvider."""

    DEFAULT: ClassVar[DiscountingFxNdfProductPricer]  # Assigned after class definition

    def present_value(self, ndf: ResolvedFxNdf, provider: RatesProvider) -> CurrencyAmount:
        settle, other = ndf.settlement_currency, ndf.non_deliverable_currency
        if provider.valuation_date > ndf.payment_date:
            return CurrencyAmount.zero(settle)
        df_settle = provider.discount_factor(settle, ndf.payment_date)
        df_other = provider.discount_factor(other, ndf.payment_date)
        fx = provider.fx_rate(other, settle)
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            amount = ndf.settlement_notional * (df_settle - ndf.agreed_rate() * fx * df_other)
        return CurrencyAmount(settle, amount)

    def currency_exposure(self, ndf: ResolvedFxNdf, provider: RatesProvider) -> MultiCurrencyAmount:
        """Exposure to each currency of the pair, before FX conversion."""
        settle, other = ndf.settlement_currency, ndf.non_deliverable_currency
        if provider.valuation_date > ndf.payment_date:
            return MultiCurrencyAmount.of(CurrencyAmount.zero(settle))
        df_settle = provider.discount_factor(settle, ndf.payment_date)
        df_other = provider.discount_factor(other, ndf.payment_date)
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            settle_leg = ndf.settlement_notional * df_settle
            other_leg = -ndf.settlement_notional * ndf.agreed_rate() * df_other
        return MultiCurrencyAmount.of(CurrencyAmount(settle, settle_leg), CurrencyAmount(other, other_leg))

    def current_cash(self, ndf: ResolvedFxNdf, provider: RatesProvider) -> CurrencyAmount:
        """Cash settled on the valuation date; zero on any other date."""
        if provider.valuation_date == ndf.payment_date:
            return self.present_value(ndf, provider)
        return CurrencyAmount.zero(ndf.settlement_currency)

    def forward_fx_rate(self, ndf: ResolvedFxNdf, provider: RatesProvider) -> FxRate:
        """Forward rate of the index pair for the payment date."""
        pair = ndf.observation.currency_pair
        spot = provider.fx_rate(pair.base, pair.counter)
        df_base = provider.discount_factor(pair.base, ndf.payment_date)
        df_counter = provider.discount_factor(pair.counter, ndf.payment_date)
        with localcontext(MEASURA_DECIMAL_CONTEXT):
            return FxRate(pair, spot * df_base / df_counter)


DiscountingFxNdfProductPricer.DEFAULT = DiscountingFxNdfProductPricer()
