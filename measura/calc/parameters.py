"""CalculationParameters — type-indexed bag of configuration objects.

Each parameter declares the kind it is looked up by (`query_type`). At most
one parameter per kind is held. Looking up a kind that is absent raises
MissingParameterError: a missing parameter is a configuration error, never
a silent default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, final, runtime_checkable

from measura.core.errors import MissingParameterError
from measura.core.money import Currency


@runtime_checkable
class CalculationParameter(Protocol):
    """A configuration object, looked up by its query type."""

    @property
    def query_type(self) -> type[Any]: ...


def _kind(param: object) -> type[Any]:
    qt = getattr(param, "query_type", None)
    return qt if isinstance(qt, type) else type(param)


@final
@dataclass(frozen=True, slots=True)
class CalculationParameters:
    """Immutable set of parameters, one per kind."""

    parameters: tuple[object, ...] = ()

    EMPTY: ClassVar[CalculationParameters]  # Assigned after class definition

    def __post_init__(self) -> None:
        kinds = [_kind(p) for p in self.parameters]
        if len(kinds) != len(set(kinds)):
            raise TypeError("CalculationParameters must hold at most one parameter per kind")

    @staticmethod
    def of(*params: object) -> CalculationParameters:
        """Create from parameters; a later parameter replaces an earlier one of the same kind."""
        by_kind: dict[type[Any], object] = {}
        for p in params:
            by_kind[_kind(p)] = p
        return CalculationParameters(parameters=tuple(by_kind.values()))

    def find_parameter[T](self, kind: type[T]) -> T | None:
        """Return the parameter of the given kind, or None."""
        for p in self.parameters:
            if _kind(p) is kind:
                return p  # type: ignore[return-value]
        return None

    def parameter[T](self, kind: type[T]) -> T:
        """Return the parameter of the given kind. Raises MissingParameterError."""
        found = self.find_parameter(kind)
        if found is None:
            raise MissingParameterError(
                f"Calculation parameter not found for type '{kind.__name__}'"
            )
        return found

    def with_parameter(self, param: object) -> CalculationParameters:
        return CalculationParameters.of(*self.parameters, param)

    def combined_with(self, other: CalculationParameters) -> CalculationParameters:
        """Union of both; parameters in self win on clash."""
        return CalculationParameters.of(*other.parameters, *self.parameters)

    def __len__(self) -> int:
        return len(self.parameters)


CalculationParameters.EMPTY = CalculationParameters()


@final
@dataclass(frozen=True, slots=True)
class ReportingCurrency:
    """Currency results are converted into by the reporting stage.

    currency=None means the natural currency of each trade.
    """

    currency: Currency | None = None

    NATURAL: ClassVar[ReportingCurrency]  # Assigned after class definition

    @staticmethod
    def of(currency: Currency) -> ReportingCurrency:
        return ReportingCurrency(currency=currency)

    @property
    def is_natural(self) -> bool:
        return self.currency is None

    @property
    def query_type(self) -> type[ReportingCurrency]:
        return ReportingCurrency

    def resolve(self, natural_currency: Currency) -> Currency:
        return natural_currency if self.currency is None else self.currency


ReportingCurrency.NATURAL = ReportingCurrency()
