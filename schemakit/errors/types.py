"""Monadic Error Handling Types

Result/Either types for deterministic, composable error propagation inside
the validation pipeline. Coercion rules, checked transforms and error
builders all speak ``Result[T, ErrorInfo]``; only the throwing parse entry
point turns failures into exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union, final

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


class IssueCode(str, Enum):
    """Taxonomy of validation issue codes.

    The first six are the core codes every schema kind can produce; the rest
    are raised by specific constraints only.
    """
    INVALID_TYPE = "invalid_type"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    INVALID_FORMAT = "invalid_format"
    REQUIRED = "required"
    CUSTOM = "custom"

    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_FINITE = "not_finite"
    UNRECOGNIZED_KEYS = "unrecognized_keys"
    DUPLICATE_KEY = "duplicate_key"


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Error payload carried by ``Err`` inside the pipeline.

    Cheap to build and never raised: coercion rules and checked transforms
    return it, and the engine converts it into a ``ValidationIssue``.
    """
    code: IssueCode
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class SchemaError(Exception):
    """Programmer error: a schema was built with invalid arguments.

    Raised eagerly at construction time (and by the depth guard at parse
    time). Never produced for bad *input* data.
    """


class SchemaDepthError(SchemaError):
    """Schema nesting exceeded the configured maximum depth."""

    def __init__(self, depth: int, max_depth: int):
        super().__init__(f"Schema nesting depth {depth} exceeds maximum of {max_depth}")
        self.depth, self.max_depth = depth, max_depth


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result monad."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")

    def map(self, f: Callable[[T], U]) -> Result[U, Any]:
        """Transform the success value."""
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], F]) -> Result[T, F]:
        """No-op for Ok variant."""
        return self  # type: ignore

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain operations that may fail."""
        return f(self.value)

    def match(self, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:
        """Pattern match on Result. Forces exhaustive handling."""
        return ok(self.value)


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result monad."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], U]) -> Result[U, E]:
        """No-op for Err variant."""
        return self  # type: ignore

    def map_err(self, f: Callable[[E], F]) -> Result[Any, F]:
        """Transform the error."""
        return Err(f(self.error))

    def and_then(self, f: Callable[[Any], Result[U, E]]) -> Result[U, E]:
        """No-op for Err variant."""
        return self  # type: ignore

    def match(self, ok: Callable[[Any], U], err: Callable[[E], U]) -> U:
        return err(self.error)


Result = Union[Ok[T], Err[E]]
