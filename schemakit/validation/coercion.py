"""Explicit Opt-in Coercion System

Coercion rules are explicit and opt-in, NEVER implicit. A schema node only
coerces when it was built with ``.coerce()`` (or through the ``coerce``
namespace); every other node rejects mismatched types outright.

Rules (fixed, not inferred from the host language):
- string:  str passes; bool -> "true"/"false"; int, float, Decimal, UUID -> str();
           date/datetime -> isoformat(). None and containers fail.
- number:  int/float pass (bool rejected); finite Decimal -> float; strings must
           be a plain ASCII decimal literal (no underscores, no inf/nan).
- boolean: bool passes; strings "true"/"false", case-insensitive, surrounding
           whitespace ignored. Nothing else.
- date:    date/datetime pass; ISO8601 date strings -> date, ISO8601 datetime
           strings (Z suffix allowed) -> datetime.

The engine looks rules up in ``ValidationConfig.coercer``; a registry built
with ``add_rule`` replaces the rule for its kind in every parse that uses it.
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar
from uuid import UUID

from schemakit.errors import ErrorInfo, Ok, Result, invalid_format, invalid_type
from .kinds import SchemaKind, describe_type, is_number

T = TypeVar("T")

_INT_LITERAL = re.compile(r"[+-]?[0-9]+")
_FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _cannot_coerce(value: Any, target: str) -> Result[Any, ErrorInfo]:
    received = describe_type(value)
    shown = f"'{value[:50]}'" if isinstance(value, str) else received
    return invalid_type(target, received, message=f"Expected {target}, received {shown}")


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[T]):
    """Base class for coercion rules.

    A rule names the schema kind it produces and converts one raw value,
    returning ``Ok`` with the converted value or ``Err`` with an ErrorInfo.
    """

    @property
    @abstractmethod
    def target_kind(self) -> SchemaKind:
        """Schema kind this rule coerces to."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, ErrorInfo]:
        """Coerce value to target type. Returns Result."""

    def __call__(self, value: Any) -> Result[T, ErrorInfo]:
        return self.coerce(value)


@dataclass(frozen=True, slots=True)
class ToString(CoercionRule[str]):
    """Stringify any primitive."""

    @property
    def target_kind(self) -> SchemaKind:
        return SchemaKind.STRING

    def coerce(self, value: Any) -> Result[str, ErrorInfo]:
        if isinstance(value, str):
            return Ok(value)
        if isinstance(value, bool):
            return Ok("true" if value else "false")
        if isinstance(value, date):
            return Ok(value.isoformat())
        if isinstance(value, (int, float, Decimal, UUID)):
            try:
                return Ok(str(value))
            except ValueError:
                return invalid_format("string", message="Integer has too many digits to convert to string")
        return _cannot_coerce(value, "string")


@dataclass(frozen=True, slots=True)
class ToNumber(CoercionRule[int | float]):
    """Parse numeric-looking strings; numbers pass through."""

    @property
    def target_kind(self) -> SchemaKind:
        return SchemaKind.NUMBER

    def coerce(self, value: Any) -> Result[int | float, ErrorInfo]:
        if is_number(value):
            return Ok(value)
        if isinstance(value, Decimal) and value.is_finite() and math.isfinite(parsed := float(value)):
            return Ok(parsed)
        if isinstance(value, str):
            stripped = value.strip()
            if _INT_LITERAL.fullmatch(stripped):
                try:
                    return Ok(int(stripped))
                except ValueError:
                    return invalid_format("number", message="Integer literal has too many digits")
            if _FLOAT_LITERAL.fullmatch(stripped):
                parsed = float(stripped)
                if math.isfinite(parsed):
                    return Ok(parsed)
        return _cannot_coerce(value, "number")


@dataclass(frozen=True, slots=True)
class ToBoolean(CoercionRule[bool]):
    """Accept only the literal forms "true" and "false"."""
    true_values: frozenset[str] = field(default=frozenset({"true"}))
    false_values: frozenset[str] = field(default=frozenset({"false"}))

    @property
    def target_kind(self) -> SchemaKind:
        return SchemaKind.BOOLEAN

    def coerce(self, value: Any) -> Result[bool, ErrorInfo]:
        if isinstance(value, bool):
            return Ok(value)
        if isinstance(value, str):
            lower = value.strip().lower()
            if lower in self.true_values:
                return Ok(True)
            if lower in self.false_values:
                return Ok(False)
        return _cannot_coerce(value, "boolean")


@dataclass(frozen=True, slots=True)
class ToDate(CoercionRule[date]):
    """Parse ISO8601 date or datetime strings; native dates pass through."""

    @property
    def target_kind(self) -> SchemaKind:
        return SchemaKind.DATE

    def coerce(self, value: Any) -> Result[date, ErrorInfo]:
        if isinstance(value, date):
            return Ok(value)
        if isinstance(value, str):
            stripped = value.strip()
            for parser in (date.fromisoformat, datetime.fromisoformat):
                try:
                    return Ok(parser(stripped.replace("Z", "+00:00")))
                except ValueError:
                    continue
        return _cannot_coerce(value, "date")


@dataclass(frozen=True, slots=True)
class ExplicitCoercion:
    """Coercion registry keyed by schema kind.

    Usage:
        yes_no = ToBoolean(true_values=frozenset({"true", "yes"}),
                           false_values=frozenset({"false", "no"}))
        config = ValidationConfig(coercer=DEFAULT_COERCER.add_rule(yes_no))
        coerce.boolean().parse("yes", config=config)  # True
    """
    rules: tuple[CoercionRule, ...] = field(default_factory=lambda: (
        ToString(),
        ToNumber(),
        ToBoolean(),
        ToDate(),
    ))

    def add_rule(self, rule: CoercionRule) -> ExplicitCoercion:
        """Add a coercion rule, returning new instance. Later rules win."""
        return ExplicitCoercion(rules=(*self.rules, rule))

    def rule_for(self, kind: SchemaKind) -> CoercionRule | None:
        for rule in reversed(self.rules):
            if rule.target_kind == kind:
                return rule
        return None

    def coerce(self, value: Any, kind: SchemaKind) -> Result[Any, ErrorInfo]:
        """Attempt to coerce value to the representation of ``kind``."""
        if (rule := self.rule_for(kind)) is None:
            return _cannot_coerce(value, kind.value)
        return rule.coerce(value)


DEFAULT_COERCER = ExplicitCoercion()
