"""Schema factories.

    from schemakit import array, coerce, number, object_, string

    User = object_({
        "name": string().min(1),
        "age": number().integer().nonnegative().optional(),
        "tags": array(string()).max(10).default([]),
    })

    Query = object_(page=coerce.number().integer().positive())

``set_``, ``map_`` and ``object_`` carry a trailing underscore so they do not
shadow the builtins when star-imported.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import SimpleNamespace
from typing import Iterable

from .options import UnknownKeys
from .schema import (
    ArraySchema,
    BooleanSchema,
    DateSchema,
    MapSchema,
    NumberSchema,
    ObjectSchema,
    SchemaNode,
    SetSchema,
    StringSchema,
)


def string() -> StringSchema:
    return StringSchema()


def number() -> NumberSchema:
    return NumberSchema()


def boolean() -> BooleanSchema:
    return BooleanSchema()


def date() -> DateSchema:
    """Accepts ``datetime.date`` and ``datetime.datetime`` values."""
    return DateSchema()


def array(element: SchemaNode) -> ArraySchema:
    return ArraySchema(element=element)


def set_(element: SchemaNode) -> SetSchema:
    return SetSchema(element=element)


def map_(key: SchemaNode, value: SchemaNode) -> MapSchema:
    return MapSchema(key=key, value=value)


def object_(fields: Mapping[str, SchemaNode] | Iterable[tuple[str, SchemaNode]] | None = None, /, *,
            unknown_keys: UnknownKeys | str | None = None, **kwargs: SchemaNode) -> ObjectSchema:
    """Build an object schema from a mapping, pairs, keyword fields, or a mix.

    Keyword fields follow the positional ones in declaration order.
    """
    pairs = list(fields.items() if isinstance(fields, Mapping) else fields or ())
    pairs.extend(kwargs.items())
    return ObjectSchema(
        fields=tuple(pairs),
        unknown_keys=UnknownKeys(unknown_keys) if unknown_keys is not None else None,
    )


coerce = SimpleNamespace(
    string=lambda: string().coerce(),
    number=lambda: number().coerce(),
    boolean=lambda: boolean().coerce(),
    date=lambda: date().coerce(),
)
