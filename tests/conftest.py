"""Hypothesis profiles and pytest fixtures for measura.

Fixtures describe one valuation date (Friday 2024-06-14) with USD and KRW
discount curves, the USD/KRW spot rate, and issuer/repo curves for one
government bill issuer. Trades are a USD-settled USD/KRW NDF and a bill
trade on that issuer.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import HealthCheck, settings

from measura.calc.market_data import CurveId, FxRateId, ImmutableScenarioMarketData
from measura.calc.parameters import CalculationParameters
from measura.core.calendar import USNY, AdjustableDate, DayCount, DaysAdjustment
from measura.core.identifiers import StandardId
from measura.core.money import Currency, CurrencyAmount, FxRate
from measura.core.reference_data import ReferenceData
from measura.market.curve import DiscountCurve
from measura.market.legal_entity import DefaultLegalEntityDiscountingMarketDataLookup
from measura.market.rates import DefaultRatesMarketDataLookup
from measura.product.bill import Bill, BillTrade, BillYieldConvention
from measura.product.fx import FxIndices, FxNdf, FxNdfTrade
from measura.product.trade import AdjustablePayment, TradeInfo

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

VAL_DATE = date(2024, 6, 14)

USD = Currency("USD")
KRW = Currency("KRW")
EUR = Currency("EUR")

USD_DISC = CurveId("Default", "USD-Disc")
KRW_DISC = CurveId("Default", "KRW-Disc")
GOVT_ISSUER = CurveId("Default", "GOVT1-Issuer")
GOVT_REPO = CurveId("Default", "GOVT1-Repo")

GOVT = StandardId.of("OG-Ticker", "GOVT1")
USD_KRW = FxRateId.of(USD, KRW)

_TIMES = (Decimal("0.25"), Decimal("1"), Decimal("2"))


def make_curve(curve_id: CurveId, currency: Currency, rates: tuple[str, str, str]) -> DiscountCurve:
    return DiscountCurve(
        curve_id=curve_id,
        currency=currency,
        valuation_date=VAL_DATE,
        times=_TIMES,
        zero_rates=tuple(Decimal(r) for r in rates),
    )


@pytest.fixture
def ref_data() -> ReferenceData:
    return ReferenceData.standard()


@pytest.fixture
def usd_curve() -> DiscountCurve:
    return make_curve(USD_DISC, USD, ("0.050", "0.052", "0.053"))


@pytest.fixture
def krw_curve() -> DiscountCurve:
    return make_curve(KRW_DISC, KRW, ("0.035", "0.034", "0.033"))


@pytest.fixture
def usd_krw_spot() -> FxRate:
    return FxRate.of("USD", "KRW", Decimal("1350"))


@pytest.fixture
def market_values(usd_curve: DiscountCurve, krw_curve: DiscountCurve, usd_krw_spot: FxRate) -> dict[object, object]:
    """Every value the fixture trades need, keyed by market data id."""
    return {
        USD_DISC: usd_curve,
        KRW_DISC: krw_curve,
        USD_KRW: usd_krw_spot,
        GOVT_ISSUER: make_curve(GOVT_ISSUER, USD, ("0.048", "0.049", "0.050")),
        GOVT_REPO: make_curve(GOVT_REPO, USD, ("0.051", "0.051", "0.051")),
    }


@pytest.fixture
def market_data(market_values: dict[object, object]) -> ImmutableScenarioMarketData:
    return ImmutableScenarioMarketData.of(VAL_DATE, market_values)


@pytest.fixture
def rates_lookup() -> DefaultRatesMarketDataLookup:
    return DefaultRatesMarketDataLookup.of({USD: USD_DISC, KRW: KRW_DISC})


@pytest.fixture
def legal_entity_lookup() -> DefaultLegalEntityDiscountingMarketDataLookup:
    return DefaultLegalEntityDiscountingMarketDataLookup.of(
        issuer_curves={(GOVT, USD): GOVT_ISSUER},
        repo_curves={(GOVT, USD): GOVT_REPO},
    )


@pytest.fixture
def parameters(
    rates_lookup: DefaultRatesMarketDataLookup,
    legal_entity_lookup: DefaultLegalEntityDiscountingMarketDataLookup,
) -> CalculationParameters:
    return CalculationParameters.of(rates_lookup, legal_entity_lookup)


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------


@pytest.fixture
def ndf() -> FxNdf:
    """Receive USD 1m against KRW at 1360, paid Monday 2024-12-16."""
    return FxNdf(
        settlement_currency_notional=CurrencyAmount.of("USD", Decimal("1000000")),
        agreed_fx_rate=FxRate.of("USD", "KRW", Decimal("1360")),
        index=FxIndices.USD_KRW_KFTC,
        payment_date=AdjustableDate(date(2024, 12, 16)),
    )


@pytest.fixture
def ndf_trade(ndf: FxNdf) -> FxNdfTrade:
    return FxNdfTrade(
        info=TradeInfo(trade_id=StandardId.of("Trade", "NDF-1"), trade_date=VAL_DATE),
        product=ndf,
    )


@pytest.fixture
def bill() -> Bill:
    """USD 1m bill maturing 2025-06-13, settling T+1 on the USNY calendar."""
    return Bill(
        security_id=StandardId.of("OG-Ticker", "GOVT1-BILL"),
        notional=AdjustablePayment.of(CurrencyAmount.of("USD", Decimal("1000000")), date(2025, 6, 13)),
        day_count=DayCount.ACT_360,
        yield_convention=BillYieldConvention.DISCOUNT,
        legal_entity_id=GOVT,
        settlement_date_offset=DaysAdjustment.of_business_days(1, USNY),
    )


@pytest.fixture
def bill_trade(bill: Bill) -> BillTrade:
    return BillTrade(
        info=TradeInfo(trade_id=StandardId.of("Trade", "BILL-1"), trade_date=VAL_DATE),
        product=bill,
        quantity=Decimal("10"),
        price=Decimal("0.95"),
    )
