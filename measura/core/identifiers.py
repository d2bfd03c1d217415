"""Scheme-qualified identifiers: StandardId.

A StandardId is a (scheme, value) pair written as 'scheme~value', used for
trade ids, security ids and legal entity ids. Validated via parse().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from measura.core.result import Err, Ok

_SEPARATOR = "~"


@final
@dataclass(frozen=True, slots=True, order=True)
class StandardId:
    """Identifier made of a non-empty scheme and a non-empty value."""

    scheme: str
    value: str

    def __post_init__(self) -> None:
        if not self.scheme or not self.value:
            raise TypeError("StandardId requires non-empty scheme and value")
        if _SEPARATOR in self.scheme:
            raise TypeError(f"StandardId scheme must not contain '{_SEPARATOR}', got {self.scheme!r}")

    @staticmethod
    def of(scheme: str, value: str) -> StandardId:
        return StandardId(scheme=scheme, value=value)

    @staticmethod
    def parse(raw: str) -> Ok[StandardId] | Err[str]:
        """Parse 'scheme~value'."""
        scheme, sep, value = raw.partition(_SEPARATOR)
        if not sep:
            return Err(f"StandardId must be 'scheme{_SEPARATOR}value', got '{raw}'")
        if not scheme or not value:
            return Err(f"StandardId scheme and value must be non-empty, got '{raw}'")
        return Ok(StandardId(scheme=scheme, value=value))

    def __str__(self) -> str:
        return f"{self.scheme}{_SEPARATOR}{self.value}"
