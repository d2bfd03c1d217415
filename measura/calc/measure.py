"""Measure — identifier of a kind of calculated output.

Measures are immutable, hashable and ordered by name so they can key a
FrozenMap. The built-in catalogue lives on `Measures`; instrument types
declare the subset they support.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, final


@final
@dataclass(frozen=True, slots=True, order=True)
class Measure:
    """A requested output quantity, e.g. present value or PV01.

    currency_convertible: whether the reporting-currency stage converts the
    result. Two measures with the same value but different convertibility
    are exposed as an alias pair.
    """

    name: str
    currency_convertible: bool = field(default=True, compare=False)

    def __post_init__(self) -> None:
        if not self.name or not self.name.replace("_", "").isalnum():
            raise TypeError(f"Measure name must be non-empty alphanumeric, got {self.name!r}")

    @staticmethod
    def of(name: str) -> Measure:
        """Look up a built-in measure by name. Raises KeyError if unknown."""
        try:
            return Measures.BY_NAME[name]
        except KeyError:
            raise KeyError(f"Unknown measure: {name}") from None

    def __str__(self) -> str:
        return self.name


class Measures:
    """Catalogue of built-in measures."""

    PRESENT_VALUE = Measure("PresentValue")
    PRESENT_VALUE_MULTI_CCY = Measure("PresentValueMultiCcy", currency_convertible=False)
    PV01 = Measure("PV01")
    BUCKETED_PV01 = Measure("BucketedPV01")
    CURRENCY_EXPOSURE = Measure("CurrencyExposure", currency_convertible=False)
    CURRENT_CASH = Measure("CurrentCash")
    FORWARD_FX_RATE = Measure("ForwardFxRate", currency_convertible=False)
    RESOLVED_TARGET = Measure("ResolvedTarget", currency_convertible=False)

    BY_NAME: ClassVar[dict[str, Measure]] = {
        m.name: m
        for m in (
            PRESENT_VALUE,
            PRESENT_VALUE_MULTI_CCY,
            PV01,
            BUCKETED_PV01,
            CURRENCY_EXPOSURE,
            CURRENT_CASH,
            FORWARD_FX_RATE,
            RESOLVED_TARGET,
        )
    }
