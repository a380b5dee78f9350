"""Compositional Validator System

Atomic validators are the constraints attached to schema nodes. They combine
via AND/OR/NOT combinators, and any validator's message can be overridden
with ``with_message``.

Features:
- Frozen dataclass validators for immutability
- Regex compiled once at construction
- Eager argument checks: a malformed constraint raises SchemaError
- Rich validation metadata for issue params
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from email.utils import parseaddr
from fractions import Fraction
from ipaddress import ip_address, IPv4Address, IPv6Address
from typing import Any, Callable, ClassVar, Sequence
from urllib.parse import urlparse
from uuid import UUID as StdUUID

from schemakit.errors import IssueCode, SchemaError
from .kinds import as_timeline, describe_type, is_number


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of one validator: valid, or a message with code and params."""
    is_valid: bool
    message: str | None = None
    code: IssueCode | None = None
    constraint: str | None = None
    params: dict[str, Any] | None = None

    @classmethod
    def valid(cls) -> ValidationResult:
        return _VALID

    @classmethod
    def invalid(cls, message: str, code: IssueCode = IssueCode.CUSTOM, *,
                constraint: str | None = None, **params) -> ValidationResult:
        return cls(is_valid=False, message=message, code=code, constraint=constraint, params=params or None)


_VALID = ValidationResult(is_valid=True)


class AtomicValidator(ABC):
    """Base class for atomic validators.

    Operators build combinators: ``a & b`` (both), ``a | b`` (either),
    ``~a`` (negation).
    """

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        ...

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Short label stored on issues, e.g. ``min_length[3]``."""

    def __call__(self, value: Any) -> ValidationResult:
        return self.validate(value)

    def __and__(self, other: AtomicValidator) -> And:
        return And(self, other)

    def __or__(self, other: AtomicValidator) -> Or:
        return Or(self, other)

    def __invert__(self) -> Not:
        return Not(self)

    def with_message(self, message: str | None) -> AtomicValidator:
        """Wrap with a fixed failure message; None leaves the validator as is."""
        return self if message is None else WithMessage(self, message)


def _type_mismatch(expected: str, value: Any) -> ValidationResult:
    received = describe_type(value)
    return ValidationResult.invalid(f"Expected {expected}, received {received}", IssueCode.INVALID_TYPE,
        constraint=expected, expected=expected, received=received)


def _check_bound(name: str, bound: Any) -> None:
    if bound is not None and (not isinstance(bound, int) or isinstance(bound, bool) or bound < 0):
        raise SchemaError(f"{name} must be a non-negative integer, got {bound!r}")


def _check_order(low: Any, high: Any) -> None:
    if low is not None and high is not None and low > high:
        raise SchemaError(f"Lower bound {low!r} is greater than upper bound {high!r}")


def _bounds_label(low: Any, high: Any, low_op: str = ">=", high_op: str = "<=") -> list[str]:
    parts = []
    if low is not None:
        parts.append(f"{low_op}{low}")
    if high is not None:
        parts.append(f"{high_op}{high}")
    return parts


class _KindCheck(AtomicValidator):
    """Validator for one runtime kind; any other value is an INVALID_TYPE result."""
    expected: ClassVar[str]

    def validate(self, value: Any) -> ValidationResult:
        if not self.accepts(value):
            return _type_mismatch(self.expected, value)
        return self.check(value)

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        ...

    @abstractmethod
    def check(self, value: Any) -> ValidationResult:
        """Validate a value already known to be of the expected kind."""


class _StringCheck(_KindCheck):
    expected: ClassVar[str] = "string"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str)


class _NumberCheck(_KindCheck):
    expected: ClassVar[str] = "number"

    def accepts(self, value: Any) -> bool:
        return is_number(value)


def _format_failure(fmt: str, constraint: str, **params) -> ValidationResult:
    return ValidationResult.invalid(f"Invalid {fmt}", IssueCode.INVALID_FORMAT, constraint=constraint,
        format=fmt, **params)


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringLength(_StringCheck):
    """Character count bounds, both inclusive."""
    min_length: int | None = None
    max_length: int | None = None

    def __post_init__(self):
        _check_bound("min_length", self.min_length)
        _check_bound("max_length", self.max_length)
        _check_order(self.min_length, self.max_length)

    @property
    def exact(self) -> bool:
        return self.min_length is not None and self.min_length == self.max_length

    @property
    def constraint_name(self) -> str:
        low, high = self.min_length, self.max_length
        if self.exact:
            return f"length[{low}]"
        if low is not None and high is not None:
            return f"length[{low},{high}]"
        return f"min_length[{low}]" if low is not None else f"max_length[{high}]"

    def check(self, value: str) -> ValidationResult:
        size = len(value)
        if self.min_length is not None and size < self.min_length:
            return ValidationResult.invalid(
                f"String must contain {'exactly' if self.exact else 'at least'} {self.min_length} character(s)",
                IssueCode.TOO_SMALL, constraint=self.constraint_name, minimum=self.min_length, actual=size)
        if self.max_length is not None and size > self.max_length:
            return ValidationResult.invalid(
                f"String must contain {'exactly' if self.exact else 'at most'} {self.max_length} character(s)",
                IssueCode.TOO_BIG, constraint=self.constraint_name, maximum=self.max_length, actual=size)
        return _VALID


@dataclass(frozen=True, slots=True)
class RegexPattern(_StringCheck):
    """Regex that must match somewhere in the string (``re.search``)."""
    pattern: str
    flags: int = 0
    description: str | None = None
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            compiled = re.compile(self.pattern, self.flags)
        except re.error as e:
            raise SchemaError(f"Invalid regex pattern {self.pattern!r}: {e}") from e
        object.__setattr__(self, "_compiled", compiled)

    @property
    def constraint_name(self) -> str:
        return self.description or f"pattern[{self.pattern}]"

    def check(self, value: str) -> ValidationResult:
        if self._compiled.search(value):
            return _VALID
        message = f"Invalid {self.description}" if self.description else f"String must match pattern {self.pattern}"
        return ValidationResult.invalid(message, IssueCode.INVALID_FORMAT, constraint=self.constraint_name,
            pattern=self.pattern)


_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


@dataclass(frozen=True, slots=True)
class EmailValidator(_StringCheck):
    """Simplified RFC 5322 address, optionally inside a display name."""
    allow_display_name: bool = False

    @property
    def constraint_name(self) -> str:
        return "email"

    def check(self, value: str) -> ValidationResult:
        address = parseaddr(value)[1] if self.allow_display_name else value
        if address and _EMAIL_PATTERN.match(address):
            return _VALID
        return _format_failure("email", self.constraint_name)


@dataclass(frozen=True, slots=True)
class UUIDValidator(_StringCheck):
    version: int | None = None

    @property
    def constraint_name(self) -> str:
        return f"uuid_v{self.version}" if self.version else "uuid"

    def check(self, value: str) -> ValidationResult:
        try:
            parsed = StdUUID(value)
        except ValueError:
            return _format_failure("uuid", self.constraint_name)
        if self.version and parsed.version != self.version:
            return ValidationResult.invalid(f"Expected UUID version {self.version}, got version {parsed.version}",
                IssueCode.INVALID_FORMAT, constraint=self.constraint_name, format="uuid")
        return _VALID


@dataclass(frozen=True, slots=True)
class DateTimeValidator(_StringCheck):
    """ISO 8601 datetime string; a trailing ``Z`` means UTC."""
    require_timezone: bool = False

    @property
    def constraint_name(self) -> str:
        return "datetime_tz" if self.require_timezone else "datetime"

    def check(self, value: str) -> ValidationResult:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return _format_failure("datetime", self.constraint_name)
        if self.require_timezone and parsed.tzinfo is None:
            return ValidationResult.invalid("Datetime must include timezone", IssueCode.INVALID_FORMAT,
                constraint=self.constraint_name, format="datetime")
        return _VALID


@dataclass(frozen=True, slots=True, init=False)
class URLValidator(_StringCheck):
    """Absolute URL with an allowed scheme and a host."""
    allowed_schemes: frozenset[str]
    require_tld: bool

    def __init__(self, allowed_schemes: Sequence[str] = ("http", "https"), require_tld: bool = True):
        object.__setattr__(self, "allowed_schemes", frozenset(allowed_schemes))
        object.__setattr__(self, "require_tld", require_tld)

    @property
    def constraint_name(self) -> str:
        return "url"

    def check(self, value: str) -> ValidationResult:
        try:
            parsed = urlparse(value)
            host = parsed.hostname or ""
        except ValueError:
            return _format_failure("url", self.constraint_name)
        if parsed.scheme in self.allowed_schemes and host and (not self.require_tld or "." in host):
            return _VALID
        return _format_failure("url", self.constraint_name, schemes=sorted(self.allowed_schemes))


_IP_PARSERS: dict[int | None, Callable[[str], Any]] = {4: IPv4Address, 6: IPv6Address, None: ip_address}


@dataclass(frozen=True, slots=True)
class IPAddressValidator(_StringCheck):
    """IPv4 or IPv6 address; ``version`` restricts to one family."""
    version: int | None = None

    def __post_init__(self):
        if self.version not in _IP_PARSERS:
            raise SchemaError(f"IP version must be 4 or 6, got {self.version!r}")

    @property
    def constraint_name(self) -> str:
        return f"ipv{self.version}" if self.version else "ip"

    def check(self, value: str) -> ValidationResult:
        try:
            _IP_PARSERS[self.version](value)
        except ValueError:
            return _format_failure("ip", self.constraint_name, version=self.version)
        return _VALID


# ============================================================================
# Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericRange(_NumberCheck):
    """Lower and upper bounds, each inclusive unless flagged exclusive."""
    min_value: float | int | None = None
    max_value: float | int | None = None
    exclusive_min: bool = False
    exclusive_max: bool = False

    def __post_init__(self):
        if any(b is not None and not is_number(b) for b in (self.min_value, self.max_value)):
            raise SchemaError(f"Numeric bounds must be numbers, got {self.min_value!r}, {self.max_value!r}")
        _check_order(self.min_value, self.max_value)

    @property
    def constraint_name(self) -> str:
        parts = _bounds_label(self.min_value, self.max_value,
            ">" if self.exclusive_min else ">=", "<" if self.exclusive_max else "<=")
        return f"range[{', '.join(parts)}]"

    def check(self, value: float) -> ValidationResult:
        low, high = self.min_value, self.max_value
        if low is not None and (value <= low if self.exclusive_min else value < low):
            qualifier = "greater than" if self.exclusive_min else "greater than or equal to"
            return ValidationResult.invalid(f"Number must be {qualifier} {low}", IssueCode.TOO_SMALL,
                constraint=self.constraint_name, minimum=low, inclusive=not self.exclusive_min)
        if high is not None and (value >= high if self.exclusive_max else value > high):
            qualifier = "less than" if self.exclusive_max else "less than or equal to"
            return ValidationResult.invalid(f"Number must be {qualifier} {high}", IssueCode.TOO_BIG,
                constraint=self.constraint_name, maximum=high, inclusive=not self.exclusive_max)
        return _VALID


@dataclass(frozen=True, slots=True)
class IsInteger(_NumberCheck):
    """No fractional part; ``5.0`` counts as an integer."""

    @property
    def constraint_name(self) -> str:
        return "integer"

    def check(self, value: float) -> ValidationResult:
        if isinstance(value, float) and not value.is_integer():
            return ValidationResult.invalid("Expected integer, received float", IssueCode.INVALID_TYPE,
                constraint=self.constraint_name, expected="integer", received="float")
        return _VALID


def _exact(number: float | int) -> Fraction:
    # floats go through their shortest repr so 0.1 is exactly 1/10
    return Fraction(number) if isinstance(number, int) else Fraction(repr(number))


@dataclass(frozen=True, slots=True)
class MultipleOf(_NumberCheck):
    """Divisibility checked in exact rational arithmetic."""
    factor: float | int

    def __post_init__(self):
        if not is_number(self.factor) or self.factor <= 0 or self.factor == math.inf:
            raise SchemaError(f"multiple_of factor must be a positive finite number, got {self.factor!r}")

    @property
    def constraint_name(self) -> str:
        return f"multiple_of[{self.factor}]"

    def _divides(self, value: float) -> bool:
        if isinstance(value, float) and not math.isfinite(value):
            return False
        return _exact(value) % _exact(self.factor) == 0

    def check(self, value: float) -> ValidationResult:
        if self._divides(value):
            return _VALID
        return ValidationResult.invalid(f"Number must be a multiple of {self.factor}", IssueCode.NOT_MULTIPLE_OF,
            constraint=self.constraint_name, multiple_of=self.factor)


@dataclass(frozen=True, slots=True)
class Finite(_NumberCheck):
    """Rejects +inf and -inf."""

    @property
    def constraint_name(self) -> str:
        return "finite"

    def check(self, value: float) -> ValidationResult:
        if isinstance(value, int) or math.isfinite(value):
            return _VALID
        return ValidationResult.invalid("Number must be finite", IssueCode.NOT_FINITE, constraint=self.constraint_name)


# ============================================================================
# Date Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class DateRange(_KindCheck):
    """Inclusive date/datetime bounds compared on a naive-UTC timeline."""
    expected: ClassVar[str] = "date"
    min_value: date | None = None
    max_value: date | None = None

    def __post_init__(self):
        if any(b is not None and not isinstance(b, date) for b in (self.min_value, self.max_value)):
            raise SchemaError(f"Date bounds must be dates, got {self.min_value!r}, {self.max_value!r}")
        if self.min_value is not None and self.max_value is not None:
            if as_timeline(self.min_value) > as_timeline(self.max_value):
                raise SchemaError(f"Lower bound {self.min_value.isoformat()} is after upper bound "
                                  f"{self.max_value.isoformat()}")

    @property
    def constraint_name(self) -> str:
        low = self.min_value.isoformat() if self.min_value is not None else None
        high = self.max_value.isoformat() if self.max_value is not None else None
        return f"date_range[{', '.join(_bounds_label(low, high))}]"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, date)

    def check(self, value: date) -> ValidationResult:
        point = as_timeline(value)
        if self.min_value is not None and point < as_timeline(self.min_value):
            bound = self.min_value.isoformat()
            return ValidationResult.invalid(f"Date must be greater than or equal to {bound}", IssueCode.TOO_SMALL,
                constraint=self.constraint_name, minimum=bound)
        if self.max_value is not None and point > as_timeline(self.max_value):
            bound = self.max_value.isoformat()
            return ValidationResult.invalid(f"Date must be smaller than or equal to {bound}", IssueCode.TOO_BIG,
                constraint=self.constraint_name, maximum=bound)
        return _VALID


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class CollectionSize(AtomicValidator):
    """Element count of a list, tuple, set or mapping; ``label`` names it in messages."""
    min_size: int | None = None
    max_size: int | None = None
    label: str = "Array"

    def __post_init__(self):
        _check_bound("min_size", self.min_size)
        _check_bound("max_size", self.max_size)
        _check_order(self.min_size, self.max_size)

    @property
    def exact(self) -> bool:
        return self.min_size is not None and self.min_size == self.max_size

    @property
    def constraint_name(self) -> str:
        return f"size[{', '.join(_bounds_label(self.min_size, self.max_size))}]"

    def validate(self, value: Any) -> ValidationResult:
        try:
            size = len(value)
        except TypeError:
            return _type_mismatch(self.label.lower(), value)
        if self.min_size is not None and size < self.min_size:
            return ValidationResult.invalid(
                f"{self.label} must contain {'exactly' if self.exact else 'at least'} {self.min_size} element(s)",
                IssueCode.TOO_SMALL, constraint=self.constraint_name, minimum=self.min_size, actual=size)
        if self.max_size is not None and size > self.max_size:
            return ValidationResult.invalid(
                f"{self.label} must contain {'exactly' if self.exact else 'at most'} {self.max_size} element(s)",
                IssueCode.TOO_BIG, constraint=self.constraint_name, maximum=self.max_size, actual=size)
        return _VALID


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class And(AtomicValidator):
    """Both must pass; the first failure is returned."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"{self.left.constraint_name} & {self.right.constraint_name}"

    def validate(self, value: Any) -> ValidationResult:
        first = self.left.validate(value)
        return first if not first.is_valid else self.right.validate(value)


@dataclass(frozen=True, slots=True)
class Or(AtomicValidator):
    """Either may pass; the right side is only evaluated when the left fails."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"{self.left.constraint_name} | {self.right.constraint_name}"

    def validate(self, value: Any) -> ValidationResult:
        first = self.left.validate(value)
        if first.is_valid:
            return _VALID
        second = self.right.validate(value)
        if second.is_valid:
            return _VALID
        return ValidationResult.invalid(f"{first.message} or {second.message}", IssueCode.CUSTOM,
            constraint=self.constraint_name, left_error=first.message, right_error=second.message)


@dataclass(frozen=True, slots=True)
class Not(AtomicValidator):
    validator: AtomicValidator
    message: str | None = None

    @property
    def constraint_name(self) -> str:
        return f"~{self.validator.constraint_name}"

    def validate(self, value: Any) -> ValidationResult:
        if not self.validator.validate(value).is_valid:
            return _VALID
        message = self.message or f"Value must not satisfy {self.validator.constraint_name}"
        return ValidationResult.invalid(message, IssueCode.CUSTOM, constraint=self.constraint_name)


@dataclass(frozen=True, slots=True)
class WithMessage(AtomicValidator):
    """Replace the wrapped validator's failure message, keeping its code and params."""
    validator: AtomicValidator
    message: str

    @property
    def constraint_name(self) -> str:
        return self.validator.constraint_name

    def validate(self, value: Any) -> ValidationResult:
        result = self.validator.validate(value)
        if result.is_valid:
            return result
        return ValidationResult(is_valid=False, message=self.message, code=result.code or IssueCode.CUSTOM,
            constraint=result.constraint, params=result.params)


# ============================================================================
# Custom Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class Predicate(AtomicValidator):
    """Boolean predicate with a fixed message and issue code."""
    predicate: Callable[[Any], bool]
    message: str = "Invalid input"
    code: IssueCode = IssueCode.CUSTOM
    name: str = "custom"

    def __post_init__(self):
        if not callable(self.predicate):
            raise SchemaError(f"Predicate must be callable, got {type(self.predicate).__name__}")

    @property
    def constraint_name(self) -> str:
        return self.name

    def validate(self, value: Any) -> ValidationResult:
        if self.predicate(value):
            return _VALID
        return ValidationResult.invalid(self.message, self.code, constraint=self.name)


@dataclass(frozen=True, slots=True)
class CustomValidator(AtomicValidator):
    """Wrap a function that returns a ValidationResult.

    Usage:
        def even(n):
            return ValidationResult.valid() if n % 2 == 0 else ValidationResult.invalid("Must be even")

        node = number().check(CustomValidator(even, name="even"))
    """
    validator_fn: Callable[[Any], ValidationResult]
    name: str = "custom"

    def __post_init__(self):
        if not callable(self.validator_fn):
            raise SchemaError(f"Validator function must be callable, got {type(self.validator_fn).__name__}")

    @property
    def constraint_name(self) -> str:
        return self.name

    def validate(self, value: Any) -> ValidationResult:
        return self.validator_fn(value)


def custom(name: str) -> Callable[[Callable[[Any], ValidationResult]], CustomValidator]:
    """Decorator form of CustomValidator: ``@custom("even")``."""
    def wrap(fn: Callable[[Any], ValidationResult]) -> CustomValidator:
        return CustomValidator(fn, name=name)
    return wrap
