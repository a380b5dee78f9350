"""Runtime value kinds.

Input values are duck-typed; every check the engine makes about "is this a
string / number / ..." goes through this closed table so the rules are
explicit (``bool`` is not a number, NaN is not a number, ``str`` is not an
array).
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable


class SchemaKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    SET = "set"
    MAP = "map"
    OBJECT = "object"


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


_KIND_CHECKS: dict[SchemaKind, Callable[[Any], bool]] = {
    SchemaKind.STRING: lambda v: isinstance(v, str),
    SchemaKind.NUMBER: is_number,
    SchemaKind.BOOLEAN: lambda v: isinstance(v, bool),
    SchemaKind.DATE: lambda v: isinstance(v, date),
    SchemaKind.ARRAY: lambda v: isinstance(v, (list, tuple)),
    SchemaKind.SET: lambda v: isinstance(v, (set, frozenset)),
    SchemaKind.MAP: lambda v: isinstance(v, Mapping),
    SchemaKind.OBJECT: lambda v: isinstance(v, Mapping),
}


def matches_kind(kind: SchemaKind, value: Any) -> bool:
    return _KIND_CHECKS[kind](value)


def describe_type(value: Any) -> str:
    """Name a runtime value's kind for "Expected X, received Y" messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float) and math.isnan(value):
        return "nan"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, date):
        return "date"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def as_timeline(value: date) -> timedelta:
    """Place a date or datetime on one comparable UTC timeline.

    The position is the distance from ``datetime.min``: dates count as
    midnight, naive datetimes as UTC, and aware datetimes are shifted by their
    offset. A timedelta stays representable where shifting the datetime itself
    would leave the calendar.
    """
    if isinstance(value, datetime):
        offset = value.utcoffset() or timedelta(0)
        return value.replace(tzinfo=None) - datetime.min - offset
    return datetime(value.year, value.month, value.day) - datetime.min
