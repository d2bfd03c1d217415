"""Market data ids and the scenario-indexed market data containers.

ScenarioMarketData holds, for every id, one value per scenario (values
shared by every scenario are stored once and broadcast). It is read-only
once built. `scoped_to(requirements)` returns a view that only exposes the
ids a calculation declared; reading anything else raises
MarketDataNotFoundError.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, final

from measura.core.errors import MarketDataNotFoundError
from measura.core.money import Currency, CurrencyPair
from measura.core.types import FrozenMap

if TYPE_CHECKING:
    from measura.calc.requirements import FunctionRequirements

# ---------------------------------------------------------------------------
# Ids
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True, order=True)
class CurveId:
    """Id of a curve within a named curve group."""

    group: str
    name: str

    def __str__(self) -> str:
        return f"{self.group}/{self.name}"


@final
@dataclass(frozen=True, slots=True, order=True)
class FxRateId:
    """Id of the spot FX rate of a currency pair.

    The pair is normalised to alphabetical order so that USD/KRW and KRW/USD
    name the same id; the stored FxRate may quote either direction.
    """

    pair: CurrencyPair

    def __post_init__(self) -> None:
        if self.pair.counter < self.pair.base:
            object.__setattr__(self, "pair", self.pair.inverse())

    @staticmethod
    def of(base: Currency, counter: Currency) -> FxRateId:
        return FxRateId(CurrencyPair(base, counter))

    def __str__(self) -> str:
        return f"FxRate:{self.pair}"


@final
@dataclass(frozen=True, slots=True, order=True)
class IndexId:
    """Id of the fixing time series of an index, e.g. an FX index."""

    name: str

    def __str__(self) -> str:
        return f"Index:{self.name}"


type MarketDataId = CurveId | FxRateId
type ObservableId = IndexId


@final
@dataclass(frozen=True, slots=True)
class ScenarioValues[T]:
    """Explicit per-scenario values for one id."""

    values: tuple[T, ...]

    @staticmethod
    def of(values: Iterable[T]) -> ScenarioValues[T]:
        return ScenarioValues(values=tuple(values))


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class MarketData(Protocol):
    """Market data for a single scenario."""

    @property
    def valuation_date(self) -> date: ...

    def value(self, id: Any) -> Any: ...  # noqa: A002

    def find_value(self, id: Any) -> Any | None: ...  # noqa: A002

    def time_series(self, id: ObservableId) -> FrozenMap[date, Decimal]: ...  # noqa: A002


class ScenarioMarketData(Protocol):
    """Market data for a set of scenarios."""

    @property
    def valuation_dates(self) -> tuple[date, ...]: ...

    @property
    def scenario_count(self) -> int: ...

    def value(self, id: Any) -> tuple[Any, ...]: ...  # noqa: A002

    def contains(self, id: Any) -> bool: ...  # noqa: A002

    def time_series(self, id: ObservableId) -> FrozenMap[date, Decimal]: ...  # noqa: A002

    def scenario(self, scenario_index: int) -> MarketData: ...

    def scoped_to(self, requirements: FunctionRequirements) -> ScenarioMarketData: ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


def _check_scope(scope: frozenset[Any] | None, id: Any) -> None:  # noqa: A002
    if scope is not None and id not in scope:
        raise MarketDataNotFoundError(
            f"Market data '{id}' was not declared in the function requirements"
        )


@final
@dataclass(frozen=True, slots=True)
class ImmutableMarketData:
    """Single-scenario view produced by ImmutableScenarioMarketData.scenario()."""

    valuation_date: date
    values: Mapping[Any, Any]
    series: Mapping[ObservableId, FrozenMap[date, Decimal]]
    scope: frozenset[Any] | None = None

    def value(self, id: Any) -> Any:  # noqa: A002
        _check_scope(self.scope, id)
        if id not in self.values:
            raise MarketDataNotFoundError(f"No market data found for '{id}'")
        return self.values[id]

    def find_value(self, id: Any) -> Any | None:  # noqa: A002
        if self.scope is not None and id not in self.scope:
            return None
        return self.values.get(id)

    def time_series(self, id: ObservableId) -> FrozenMap[date, Decimal]:  # noqa: A002
        _check_scope(self.scope, id)
        return self.series.get(id, FrozenMap.EMPTY)


@final
@dataclass(frozen=True, slots=True)
class ImmutableScenarioMarketData:
    """Scenario market data backed by immutable mappings.

    values: id -> tuple of one value per scenario.
    scope: ids readable through this view (None = all).
    """

    valuation_dates: tuple[date, ...]
    values: Mapping[Any, tuple[Any, ...]] = field(default_factory=lambda: MappingProxyType({}))
    series: Mapping[ObservableId, FrozenMap[date, Decimal]] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    scope: frozenset[Any] | None = None

    def __post_init__(self) -> None:
        if not self.valuation_dates:
            raise TypeError("ImmutableScenarioMarketData requires at least one scenario")
        for key, per_scenario in self.values.items():
            if len(per_scenario) != len(self.valuation_dates):
                raise TypeError(
                    f"Market data '{key}' has {len(per_scenario)} values, "
                    f"expected one per scenario ({len(self.valuation_dates)})"
                )

    @staticmethod
    def of(
        valuation_dates: date | Iterable[date],
        values: Mapping[Any, Any] | None = None,
        time_series: Mapping[ObservableId, FrozenMap[date, Decimal]] | None = None,
    ) -> ImmutableScenarioMarketData:
        """Build from plain values (broadcast) and ScenarioValues (one per scenario).

        A single valuation date with ScenarioValues of length n is broadcast
        to n scenarios.
        """
        raw = dict(values or {})
        dates = (valuation_dates,) if isinstance(valuation_dates, date) else tuple(valuation_dates)
        counts = {len(v.values) for v in raw.values() if isinstance(v, ScenarioValues)}
        if len(counts) > 1:
            raise TypeError(f"Inconsistent scenario counts in market data: {sorted(counts)}")
        count = counts.pop() if counts else len(dates)
        if len(dates) == 1 and count > 1:
            dates = dates * count
        if count != len(dates):
            raise TypeError(f"Scenario count {count} does not match {len(dates)} valuation dates")
        boxed = {
            k: (v.values if isinstance(v, ScenarioValues) else (v,) * count)
            for k, v in raw.items()
        }
        return ImmutableScenarioMarketData(
            valuation_dates=dates,
            values=MappingProxyType(boxed),
            series=MappingProxyType(dict(time_series or {})),
        )

    @property
    def scenario_count(self) -> int:
        return len(self.valuation_dates)

    def ids(self) -> frozenset[Any]:
        ids = frozenset(self.values)
        return ids if self.scope is None else ids & self.scope

    def contains(self, id: Any) -> bool:  # noqa: A002
        return id in self.values and (self.scope is None or id in self.scope)

    def value(self, id: Any) -> tuple[Any, ...]:  # noqa: A002
        _check_scope(self.scope, id)
        if id not in self.values:
            raise MarketDataNotFoundError(f"No market data found for '{id}'")
        return self.values[id]

    def time_series(self, id: ObservableId) -> FrozenMap[date, Decimal]:  # noqa: A002
        _check_scope(self.scope, id)
        return self.series.get(id, FrozenMap.EMPTY)

    def scenario(self, scenario_index: int) -> ImmutableMarketData:
        if not 0 <= scenario_index < self.scenario_count:
            raise IndexError(
                f"Scenario index {scenario_index} out of range for {self.scenario_count} scenarios"
            )
        return ImmutableMarketData(
            valuation_date=self.valuation_dates[scenario_index],
            values=MappingProxyType({k: v[scenario_index] for k, v in self.values.items()}),
            series=self.series,
            scope=self.scope,
        )

    def scoped_to(self, requirements: FunctionRequirements) -> ImmutableScenarioMarketData:
        """View restricted to the declared value and time-series ids."""
        declared = frozenset(requirements.value_requirements) | frozenset(
            requirements.time_series_requirements
        )
        scope = declared if self.scope is None else declared & self.scope
        return replace(self, scope=scope)
