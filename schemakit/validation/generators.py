"""Schema Generators

Export a schema node tree as JSON Schema (draft 2020-12) so the same tree
that validates input can document it.

Coercive leaves are exported with their target type. Effects are not
representable and are skipped, as are validators without a JSON Schema
counterpart (custom predicates, combinators) and factory defaults, which
are only produced at parse time. Date nodes accept dates and datetimes,
so they export both string formats.
"""
from __future__ import annotations

import copy
import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from .kinds import SchemaKind
from .options import UnknownKeys
from .validators import (
    AtomicValidator,
    CollectionSize,
    DateRange,
    DateTimeValidator,
    EmailValidator,
    IPAddressValidator,
    IsInteger,
    MultipleOf,
    NumericRange,
    RegexPattern,
    StringLength,
    URLValidator,
    UUIDValidator,
    WithMessage,
)

if TYPE_CHECKING:
    from .schema import SchemaNode

DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"


class SchemaGenerator(ABC):
    """Base class for schema generators."""

    @abstractmethod
    def generate(self, schema: SchemaNode) -> dict[str, Any]:
        """Generate schema representation."""

    def generate_json(self, schema: SchemaNode, *, indent: int | None = 2) -> str:
        return json.dumps(self.generate(schema), indent=indent, default=str)


class JSONSchemaGenerator(SchemaGenerator):
    """Generate JSON Schema (draft 2020-12)."""

    TYPE_MAP: dict[SchemaKind, dict[str, Any]] = {
        SchemaKind.STRING: {"type": "string"},
        SchemaKind.NUMBER: {"type": "number"},
        SchemaKind.BOOLEAN: {"type": "boolean"},
        SchemaKind.DATE: {"type": "string", "anyOf": [{"format": "date"}, {"format": "date-time"}]},
        SchemaKind.ARRAY: {"type": "array"},
        SchemaKind.SET: {"type": "array", "uniqueItems": True},
        SchemaKind.MAP: {"type": "object"},
        SchemaKind.OBJECT: {"type": "object"},
    }

    def __init__(self, include_dialect: bool = True):
        self.include_dialect = include_dialect

    def generate(self, schema: SchemaNode) -> dict[str, Any]:
        """Generate JSON Schema."""
        result = self._node(schema)
        if self.include_dialect:
            result = {"$schema": DRAFT_2020_12, **result}
        return result

    def _node(self, node: SchemaNode) -> dict[str, Any]:
        result = copy.deepcopy(self.TYPE_MAP[node.kind])

        if node.kind is SchemaKind.ARRAY or node.kind is SchemaKind.SET:
            result["items"] = self._node(node.element)
        elif node.kind is SchemaKind.MAP:
            result["additionalProperties"] = self._node(node.value)
            if node.key.kind is SchemaKind.STRING:
                result["propertyNames"] = self._constraints_only(node.key)
        elif node.kind is SchemaKind.OBJECT:
            result["properties"] = {name: self._node(child) for name, child in node.fields}
            if required := [name for name in node.keys if name not in node.optional_fields]:
                result["required"] = required
            if node.unknown_keys is UnknownKeys.STRICT:
                result["additionalProperties"] = False

        for validator in node.constraints:
            self._apply_validator(node.kind, _unwrap(validator), result)

        if node.description:
            result["description"] = node.description
        if node.has_static_default:
            result["default"] = copy.deepcopy(node.default_value)
        if node.is_nullable:
            result = {"anyOf": [result, {"type": "null"}]}
        return result

    def _constraints_only(self, node: SchemaNode) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for validator in node.constraints:
            self._apply_validator(node.kind, _unwrap(validator), result)
        return result

    def _apply_validator(self, kind: SchemaKind, validator: AtomicValidator, out: dict[str, Any]) -> None:
        if (handler := _VALIDATOR_KEYWORDS.get(type(validator))) is not None:
            handler(kind, validator, out)


def _unwrap(validator: AtomicValidator) -> AtomicValidator:
    while isinstance(validator, WithMessage):
        validator = validator.validator
    return validator


def _tighten(out: dict[str, Any], key: str, value: Any, pick: Callable[[Any, Any], Any]) -> None:
    out[key] = pick(out[key], value) if key in out else value


def _string_length(kind, v: StringLength, out):
    if v.min_length is not None:
        _tighten(out, "minLength", v.min_length, max)
    if v.max_length is not None:
        _tighten(out, "maxLength", v.max_length, min)


def _numeric_range(kind, v: NumericRange, out):
    if v.min_value is not None:
        _tighten(out, "exclusiveMinimum" if v.exclusive_min else "minimum", v.min_value, max)
    if v.max_value is not None:
        _tighten(out, "exclusiveMaximum" if v.exclusive_max else "maximum", v.max_value, min)


def _collection_size(kind, v: CollectionSize, out):
    low, high = ("minProperties", "maxProperties") if kind is SchemaKind.MAP else ("minItems", "maxItems")
    if v.min_size is not None:
        _tighten(out, low, v.min_size, max)
    if v.max_size is not None:
        _tighten(out, high, v.max_size, min)


def _date_range(kind, v: DateRange, out):
    if v.min_value is not None:
        out["formatMinimum"] = v.min_value.isoformat()
    if v.max_value is not None:
        out["formatMaximum"] = v.max_value.isoformat()


def _ip(kind, v: IPAddressValidator, out):
    if v.version is not None:
        out["format"] = f"ipv{v.version}"


_VALIDATOR_KEYWORDS: dict[type, Callable[[SchemaKind, Any, dict[str, Any]], None]] = {
    StringLength: _string_length,
    NumericRange: _numeric_range,
    CollectionSize: _collection_size,
    DateRange: _date_range,
    IPAddressValidator: _ip,
    EmailValidator: lambda kind, v, out: out.update(format="email"),
    URLValidator: lambda kind, v, out: out.update(format="uri"),
    UUIDValidator: lambda kind, v, out: out.update(format="uuid"),
    DateTimeValidator: lambda kind, v, out: out.update(format="date-time"),
    RegexPattern: lambda kind, v, out: out.update(pattern=v.pattern),
    MultipleOf: lambda kind, v, out: out.update(multipleOf=v.factor),
    IsInteger: lambda kind, v, out: out.update(type="integer"),
}


def to_json_schema(schema: SchemaNode, *, include_dialect: bool = True) -> dict[str, Any]:
    """Convenience function for JSONSchemaGenerator().generate()."""
    return JSONSchemaGenerator(include_dialect=include_dialect).generate(schema)
