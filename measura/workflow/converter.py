"""Temporal DataConverter for measura workflow types.

Workflow payloads are frozen dataclasses of strings, dates, Decimals,
enums and tuples. Dataclass instances are tagged with ``__type__`` so that
nested payloads (a CalculationRequest inside a CalculationInput, the
MeasureOutcome tuple inside a CalculationOutcome) decode to the right class.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, get_type_hints

from temporalio.converter import (
    CompositePayloadConverter,
    DataConverter,
    DefaultPayloadConverter,
    JSONPlainPayloadConverter,
    JSONTypeConverter,
)

# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def to_json(obj: Any) -> Any:
    """Recursively convert a payload to JSON-compatible values."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Decimal):
        return {"__decimal__": str(obj)}
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, date):
        return {"__date__": obj.isoformat()}
    if isinstance(obj, Enum):
        return obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d: dict[str, Any] = {"__type__": f"{type(obj).__module__}.{type(obj).__qualname__}"}
        for field in dataclasses.fields(obj):
            d[field.name] = to_json(getattr(obj, field.name))
        return d
    if isinstance(obj, (tuple, list)):
        return [to_json(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): to_json(v) for k, v in obj.items()}
    raise TypeError(f"Cannot encode {type(obj).__name__} in a workflow payload")


class MeasuraJSONEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        result = to_json(o)
        if result is not o:
            return result
        return super().default(o)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

# Only classes from these modules are instantiated from a payload.
_ALLOWED_MODULES: frozenset[str] = frozenset({
    "measura.workflow.types",
})

_CLASS_CACHE: dict[str, type] = {}


def _resolve_class(fqn: str) -> type | None:
    if fqn in _CLASS_CACHE:
        return _CLASS_CACHE[fqn]
    module_name, _, class_name = fqn.rpartition(".")
    if module_name not in _ALLOWED_MODULES:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    cls = getattr(module, class_name, None)
    if isinstance(cls, type):
        _CLASS_CACHE[fqn] = cls
        return cls
    return None


def from_json(hint: Any, value: Any) -> Any:
    """Recursively convert JSON values back to payload types."""
    if value is None:
        return None

    if isinstance(value, dict) and "__type__" in value:
        cls = _resolve_class(value["__type__"])
        if cls is None or not dataclasses.is_dataclass(cls):
            raise TypeError(f"Payload type not allowed: {value['__type__']}")
        hints = get_type_hints(cls)
        kwargs: dict[str, Any] = {
            field.name: from_json(hints.get(field.name, Any), value[field.name])
            for field in dataclasses.fields(cls)
            if field.name in value
        }
        return cls(**kwargs)

    if isinstance(value, dict) and "__decimal__" in value:
        return Decimal(value["__decimal__"])
    if isinstance(value, dict) and "__date__" in value:
        return date.fromisoformat(value["__date__"])
    if hint is Decimal and isinstance(value, (int, float, str)):
        return Decimal(str(value))
    if hint is date and isinstance(value, str):
        return date.fromisoformat(value)
    if isinstance(hint, type) and issubclass(hint, Enum) and not isinstance(value, Enum):
        return hint(value)
    if isinstance(value, list):
        return tuple(from_json(Any, x) for x in value)
    return value


class MeasuraJSONTypeConverter(JSONTypeConverter):
    """Decode tagged JSON values back to workflow types."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and ("__type__" in value or "__decimal__" in value or "__date__" in value):
            return from_json(hint, value)
        if hint is Decimal or hint is date:
            return from_json(hint, value)
        return JSONTypeConverter.Unhandled


# ---------------------------------------------------------------------------
# Wire up
# ---------------------------------------------------------------------------


class MeasuraPayloadConverter(CompositePayloadConverter):
    def __init__(self) -> None:
        json_converter = JSONPlainPayloadConverter(
            encoder=MeasuraJSONEncoder,
            custom_type_converters=[MeasuraJSONTypeConverter()],
        )
        super().__init__(
            *(
                c
                for c in DefaultPayloadConverter.default_encoding_payload_converters
                if not isinstance(c, JSONPlainPayloadConverter)
            ),
            json_converter,
        )


MEASURA_DATA_CONVERTER = DataConverter(
    payload_converter_class=MeasuraPayloadConverter,
)
