"""Core Schema Nodes

Schema nodes are immutable descriptions of one validation rule. Builder
methods never mutate: each call returns a new node, so a tree built once at
import time can be shared by every parse call and every thread.

Leaf kinds: string, number, boolean, date.
Container kinds: array, set, map, object.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date as Date
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Iterable, Self, Sequence, TypeVar

from schemakit.errors import IssueCode, SchemaError
from schemakit.logging import schema_logger
from . import engine
from .effects import CheckedTransform, Effect, Refinement, Transform
from .errors import PathSegment
from .kinds import SchemaKind
from .options import UnknownKeys, ValidationConfig, ValidationMode
from .result import ParseResult
from .validators import (
    AtomicValidator,
    CollectionSize,
    DateRange,
    DateTimeValidator,
    EmailValidator,
    Finite,
    IPAddressValidator,
    IsInteger,
    MultipleOf,
    NumericRange,
    Predicate,
    RegexPattern,
    StringLength,
    URLValidator,
    UUIDValidator,
)

T = TypeVar("T")

_NO_DEFAULT: Any = object()

_LEAF_KINDS = frozenset({SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.BOOLEAN, SchemaKind.DATE})


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaNode:
    """Base schema node.

    Holds what every kind shares: the ordered constraint list, the ordered
    effect chain (refinements and transforms), optionality, nullability,
    an optional default and a description.
    """
    kind: ClassVar[SchemaKind]

    constraints: tuple[AtomicValidator, ...] = ()
    effects: tuple[Effect, ...] = ()
    is_optional: bool = False
    is_nullable: bool = False
    default_fn: Callable[[], Any] | None = None
    default_value: Any = field(default=_NO_DEFAULT, compare=False, repr=False)
    description: str | None = None

    # -- constraints -------------------------------------------------------

    def check(self, validator: AtomicValidator) -> Self:
        """Attach any atomic validator (combinators included)."""
        if not isinstance(validator, AtomicValidator):
            raise SchemaError(f"check() expects an AtomicValidator, got {type(validator).__name__}")
        return replace(self, constraints=(*self.constraints, validator))

    def with_constraint(self, predicate: Callable[[Any], bool], message: str,
                        code: IssueCode = IssueCode.CUSTOM) -> Self:
        """Attach a boolean predicate with its own message and issue code."""
        return self.check(Predicate(predicate, message=message, code=code))

    # -- presence ----------------------------------------------------------

    def optional(self) -> Self:
        """Allow this node's field to be absent from an object."""
        return replace(self, is_optional=True)

    def required(self) -> Self:
        return replace(self, is_optional=False)

    def nullable(self) -> Self:
        """Accept None and return it unchanged."""
        return replace(self, is_nullable=True)

    def default(self, value: Any) -> Self:
        """Use ``value`` (deep-copied per parse) when the field is absent."""
        return replace(self, default_fn=lambda: copy.deepcopy(value), default_value=value)

    def default_factory(self, factory: Callable[[], Any]) -> Self:
        if not callable(factory):
            raise SchemaError(f"default factory must be callable, got {type(factory).__name__}")
        return replace(self, default_fn=factory, default_value=_NO_DEFAULT)

    @property
    def has_default(self) -> bool:
        return self.default_fn is not None

    @property
    def has_static_default(self) -> bool:
        """True for ``default(value)``; factory defaults are only known at parse time."""
        return self.default_value is not _NO_DEFAULT

    # -- effects -----------------------------------------------------------

    def refine(self, predicate: Callable[[Any], bool], message: str = "Invalid input",
               path: Sequence[PathSegment] = ()) -> Self:
        """Add a CUSTOM check that runs after the whole subtree validated."""
        return replace(self, effects=(*self.effects, Refinement(predicate, message, tuple(path))))

    def transform(self, fn: Callable[[Any], Any]) -> Self:
        """Map the validated value through ``fn``."""
        return replace(self, effects=(*self.effects, Transform(fn)))

    def try_transform(self, fn: Callable[[Any], Any]) -> Self:
        """Map through ``fn`` returning ``Ok(value)`` or ``Err(message | issues)``."""
        return replace(self, effects=(*self.effects, CheckedTransform(fn)))

    def describe(self, text: str) -> Self:
        return replace(self, description=text)

    # -- parsing -----------------------------------------------------------

    def parse(self, value: Any, *, mode: ValidationMode | str | None = None,
              config: ValidationConfig | None = None) -> Any:
        """Return the parsed value or raise ValidationError with every issue."""
        return engine.parse(self, value, mode=mode, config=config)

    def safe_parse(self, value: Any, *, mode: ValidationMode | str | None = None,
                   config: ValidationConfig | None = None) -> ParseResult:
        """Return ParseSuccess or ParseFailure; never raises for bad input."""
        return engine.safe_parse(self, value, mode=mode, config=config)

    def json_schema(self) -> dict[str, Any]:
        from .generators import JSONSchemaGenerator
        return JSONSchemaGenerator().generate(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class LeafSchema(SchemaNode):
    """Scalar node that may opt in to coercion."""
    coercive: bool = False

    def coerce(self) -> Self:
        """Run the kind's coercion rule before type checks and constraints."""
        return replace(self, coercive=True)


@dataclass(frozen=True, slots=True, kw_only=True)
class StringSchema(LeafSchema):
    kind: ClassVar[SchemaKind] = SchemaKind.STRING

    def min(self, length: int, message: str | None = None) -> Self:
        return self.check(StringLength(min_length=length).with_message(message))

    def max(self, length: int, message: str | None = None) -> Self:
        return self.check(StringLength(max_length=length).with_message(message))

    def length(self, length: int, message: str | None = None) -> Self:
        return self.check(StringLength(min_length=length, max_length=length).with_message(message))

    def nonempty(self, message: str | None = None) -> Self:
        return self.min(1, message)

    def email(self, message: str | None = None) -> Self:
        return self.check(EmailValidator().with_message(message))

    def url(self, message: str | None = None, *, schemes: Sequence[str] = ("http", "https")) -> Self:
        return self.check(URLValidator(allowed_schemes=schemes).with_message(message))

    def uuid(self, message: str | None = None, *, version: int | None = None) -> Self:
        return self.check(UUIDValidator(version=version).with_message(message))

    def regex(self, pattern: str, message: str | None = None, *, flags: int = 0,
              description: str | None = None) -> Self:
        return self.check(RegexPattern(pattern, flags, description).with_message(message))

    def datetime(self, message: str | None = None, *, require_timezone: bool = False) -> Self:
        return self.check(DateTimeValidator(require_timezone=require_timezone).with_message(message))

    def ip(self, message: str | None = None, *, version: int | None = None) -> Self:
        return self.check(IPAddressValidator(version=version).with_message(message))


@dataclass(frozen=True, slots=True, kw_only=True)
class NumberSchema(LeafSchema):
    kind: ClassVar[SchemaKind] = SchemaKind.NUMBER

    def min(self, value: float, message: str | None = None) -> Self:
        return self.check(NumericRange(min_value=value).with_message(message))

    def max(self, value: float, message: str | None = None) -> Self:
        return self.check(NumericRange(max_value=value).with_message(message))

    def gt(self, value: float, message: str | None = None) -> Self:
        return self.check(NumericRange(min_value=value, exclusive_min=True).with_message(message))

    def lt(self, value: float, message: str | None = None) -> Self:
        return self.check(NumericRange(max_value=value, exclusive_max=True).with_message(message))

    def positive(self, message: str | None = None) -> Self:
        return self.gt(0, message)

    def nonnegative(self, message: str | None = None) -> Self:
        return self.min(0, message)

    def negative(self, message: str | None = None) -> Self:
        return self.lt(0, message)

    def nonpositive(self, message: str | None = None) -> Self:
        return self.max(0, message)

    def integer(self, message: str | None = None) -> Self:
        return self.check(IsInteger().with_message(message))

    def multiple_of(self, factor: float, message: str | None = None) -> Self:
        return self.check(MultipleOf(factor).with_message(message))

    def finite(self, message: str | None = None) -> Self:
        return self.check(Finite().with_message(message))


@dataclass(frozen=True, slots=True, kw_only=True)
class BooleanSchema(LeafSchema):
    kind: ClassVar[SchemaKind] = SchemaKind.BOOLEAN


@dataclass(frozen=True, slots=True, kw_only=True)
class DateSchema(LeafSchema):
    kind: ClassVar[SchemaKind] = SchemaKind.DATE

    def min(self, value: Date, message: str | None = None) -> Self:
        return self.check(DateRange(min_value=value).with_message(message))

    def max(self, value: Date, message: str | None = None) -> Self:
        return self.check(DateRange(max_value=value).with_message(message))


def _require_node(value: Any, role: str) -> None:
    if not isinstance(value, SchemaNode):
        raise SchemaError(f"{role} must be a schema node, got {type(value).__name__}")


def _require_leaf(value: Any, role: str) -> None:
    _require_node(value, role)
    if value.kind not in _LEAF_KINDS:
        raise SchemaError(f"{role} must be a leaf schema (string, number, boolean or date), got {value.kind.value}")


class _SizedMixin:
    """Size builders shared by array, set and map nodes."""
    __slots__ = ()
    size_label: ClassVar[str]

    def min(self, size: int, message: str | None = None) -> Self:
        return self.check(CollectionSize(min_size=size, label=self.size_label).with_message(message))

    def max(self, size: int, message: str | None = None) -> Self:
        return self.check(CollectionSize(max_size=size, label=self.size_label).with_message(message))

    def size(self, size: int, message: str | None = None) -> Self:
        return self.check(CollectionSize(min_size=size, max_size=size, label=self.size_label).with_message(message))

    def nonempty(self, message: str | None = None) -> Self:
        return self.min(1, message)


@dataclass(frozen=True, slots=True, kw_only=True)
class ArraySchema(_SizedMixin, SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.ARRAY
    size_label: ClassVar[str] = "Array"
    element: SchemaNode

    def __post_init__(self):
        _require_node(self.element, "Array element schema")

    def length(self, size: int, message: str | None = None) -> Self:
        return self.size(size, message)


@dataclass(frozen=True, slots=True, kw_only=True)
class SetSchema(_SizedMixin, SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.SET
    size_label: ClassVar[str] = "Set"
    element: SchemaNode

    def __post_init__(self):
        _require_leaf(self.element, "Set element schema")


@dataclass(frozen=True, slots=True, kw_only=True)
class MapSchema(_SizedMixin, SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.MAP
    size_label: ClassVar[str] = "Map"
    key: SchemaNode
    value: SchemaNode

    def __post_init__(self):
        _require_leaf(self.key, "Map key schema")
        _require_node(self.value, "Map value schema")


def _freeze_fields(fields: Mapping[str, SchemaNode] | Iterable[tuple[str, SchemaNode]]) -> tuple[tuple[str, SchemaNode], ...]:
    pairs = tuple(fields.items() if isinstance(fields, Mapping) else fields)
    seen: set[str] = set()
    for name, node in pairs:
        if not isinstance(name, str):
            raise SchemaError(f"Object field names must be strings, got {name!r}")
        if name in seen:
            raise SchemaError(f"Duplicate object field {name!r}")
        seen.add(name)
        _require_node(node, f"Field {name!r}")
    return pairs


@dataclass(frozen=True, slots=True, kw_only=True)
class ObjectSchema(SchemaNode):
    """Object node: ordered field name -> node.

    A field may be absent when its node is optional or has a default.
    ``unknown_keys`` of None defers to ``ValidationConfig.unknown_keys``.
    """
    kind: ClassVar[SchemaKind] = SchemaKind.OBJECT
    fields: tuple[tuple[str, SchemaNode], ...] = ()
    unknown_keys: UnknownKeys | None = None

    def __post_init__(self):
        object.__setattr__(self, "fields", _freeze_fields(self.fields))

    @property
    def shape(self) -> Mapping[str, SchemaNode]:
        return MappingProxyType(dict(self.fields))

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    @property
    def optional_fields(self) -> frozenset[str]:
        """Names of fields allowed to be absent from input."""
        return frozenset(name for name, node in self.fields if node.is_optional or node.has_default)

    def strict(self) -> Self:
        return replace(self, unknown_keys=UnknownKeys.STRICT)

    def passthrough(self) -> Self:
        return replace(self, unknown_keys=UnknownKeys.PASSTHROUGH)

    def strip(self) -> Self:
        return replace(self, unknown_keys=UnknownKeys.STRIP)

    def extend(self, fields: Mapping[str, SchemaNode]) -> Self:
        """Add fields; a name that already exists is replaced in place."""
        merged = dict(self.fields)
        for name in fields:
            if name in merged:
                schema_logger().debug("object_field_overridden", field=name)
        merged.update(fields)
        return replace(self, fields=tuple(merged.items()))

    def pick(self, *names: str) -> Self:
        self._require_known(names)
        return replace(self, fields=tuple((n, node) for n, node in self.fields if n in names))

    def omit(self, *names: str) -> Self:
        self._require_known(names)
        return replace(self, fields=tuple((n, node) for n, node in self.fields if n not in names))

    def partial(self, *names: str) -> Self:
        """Make the named fields (all fields when none given) optional."""
        self._require_known(names)
        targets = set(names) if names else set(self.keys)
        return replace(self, fields=tuple(
            (n, node.optional() if n in targets else node) for n, node in self.fields))

    def _require_known(self, names: Iterable[str]) -> None:
        if unknown := [n for n in names if n not in self.keys]:
            raise SchemaError(f"Unknown object field(s): {', '.join(map(repr, unknown))}")
