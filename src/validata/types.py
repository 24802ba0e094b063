"""Type registry for validata.

Classifies Python values into a fixed set of type tags and converts values
between tags ("casting"). Tags are plain strings so they can be written
directly in schemas:

    number(cast_from="string")
    string(cast_from=["integer", "boolean"])
"""

import dataclasses
import datetime
import enum
import logging
import math
import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable

logger = logging.getLogger(__name__)


VALID_TYPES: tuple[str, ...] = (
    "any",
    "null",
    "string",
    "bytes",
    "number",
    "integer",
    "float",
    "boolean",
    "symbol",
    "function",
    "class",
    "list",
    "tuple",
    "set",
    "map",
    "struct",
)

# Whole-string parses only; partial matches must fail the cast.
INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
FLOAT_PATTERN = re.compile(r"[+-]?\d+(\.\d+)?([eE][+-]?\d+)?", re.ASCII)


class CastError(Exception):
    """Raised when a value cannot be converted to the requested type."""

    def __init__(self, output_type: str):
        self.output_type = output_type
        super().__init__(f"Cannot be cast to {output_type}.")


# =============================================================================
# Classification
# =============================================================================


# Named value types from the standard library treated like dataclasses.
# Subclasses come first: datetime is a date.
_TEMPORAL_FIELDS: tuple[tuple[type, tuple[str, ...]], ...] = (
    (datetime.datetime, ("year", "month", "day", "hour", "minute", "second", "microsecond", "tzinfo")),
    (datetime.date, ("year", "month", "day")),
    (datetime.time, ("hour", "minute", "second", "microsecond", "tzinfo")),
)


def is_struct(value: Any) -> bool:
    """True for dataclass instances and date/time values (not classes)."""
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or isinstance(value, (datetime.date, datetime.time))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def has_type(value: Any, expected_type: str) -> bool:
    """Check whether a value belongs to the given type tag.

    Structural tags require an exact classification: a dataclass instance
    does not match "map", and a bool does not match "integer".
    """
    if expected_type == "any":
        return True
    if expected_type == "number":
        return _is_number(value)
    if expected_type == "function":
        return callable(value) and not isinstance(value, type)
    return type_of(value) == expected_type


def type_of(value: Any) -> str:
    """Return the type tag of a value. Total over all Python values."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, enum.Enum):
        return "symbol"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if _is_number(value):
        return "number"
    if isinstance(value, type):
        return "class"
    if is_struct(value):
        return "struct"
    if isinstance(value, list):
        return "list"
    if isinstance(value, tuple):
        return "tuple"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, Mapping):
        return "map"
    if callable(value):
        return "function"
    return "any"


def struct_fields(value: Any) -> dict[str, Any]:
    """Shallow field mapping of a struct."""
    for cls, names in _TEMPORAL_FIELDS:
        if isinstance(value, cls):
            return {name: getattr(value, name) for name in names}
    return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}


def type_name(cls: type) -> str:
    """Display name of a named type (used for struct errors)."""
    return cls.__qualname__


# =============================================================================
# Casting
# =============================================================================


def _round_half_away(value: float | Decimal) -> int:
    if isinstance(value, Decimal):
        return int(value.to_integral_value(rounding=ROUND_HALF_UP))
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _string_to_integer(value: str) -> int:
    if not INTEGER_PATTERN.fullmatch(value):
        raise ValueError(value)
    return int(value)


def _string_to_float(value: str) -> float:
    if not FLOAT_PATTERN.fullmatch(value):
        raise ValueError(value)
    return float(value)


def _string_to_number(value: str) -> int | float:
    if INTEGER_PATTERN.fullmatch(value):
        return int(value)
    return _string_to_float(value)


def _string_to_boolean(value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(value)


def _boolean_to_string(value: bool) -> str:
    return "true" if value else "false"


_CASTS: dict[tuple[str, str], Callable[[Any], Any]] = {
    ("string", "number"): _string_to_number,
    ("string", "integer"): _string_to_integer,
    ("string", "float"): _string_to_float,
    ("string", "boolean"): _string_to_boolean,
    ("number", "integer"): _round_half_away,
    ("number", "float"): float,
    ("number", "string"): str,
    ("integer", "float"): float,
    ("integer", "number"): lambda value: value,
    ("integer", "string"): str,
    ("float", "integer"): _round_half_away,
    ("float", "number"): lambda value: value,
    ("float", "string"): repr,
    ("boolean", "string"): _boolean_to_string,
    ("symbol", "string"): lambda value: value.name,
    ("bytes", "string"): lambda value: bytes(value).decode("utf-8"),
    ("list", "tuple"): tuple,
    ("tuple", "list"): list,
    ("set", "list"): list,
    ("struct", "map"): struct_fields,
}


def cast_with(value: Any, output_type: str, converter: Callable[[Any], Any]) -> Any:
    """Convert a value with the given converter.

    Any exception raised by the converter is turned into a CastError, so
    user-supplied converters can simply raise (e.g. ``date.fromisoformat``).

    Raises:
        CastError: If the converter fails
    """
    try:
        return converter(value)
    except Exception as exc:
        logger.debug("Converter to %s failed for %r: %s", output_type, value, exc)
        raise CastError(output_type) from exc


def cast(value: Any, from_type: str, to_type: str) -> Any:
    """Convert a value from one type tag to another.

    Returns the value unchanged when both tags are equal.

    Raises:
        CastError: If the pair is not in the conversion table or the
            conversion fails
    """
    if from_type == to_type:
        return value

    converter = _CASTS.get((from_type, to_type))
    if converter is None:
        raise CastError(to_type)
    return cast_with(value, to_type, converter)
