"""Discriminated parse results returned by ``safe_parse``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Literal, NoReturn, TypeVar, Union, final

from .errors import ValidationError, ValidationIssue

T = TypeVar("T")
U = TypeVar("U")


@final
@dataclass(frozen=True, slots=True)
class ParseSuccess(Generic[T]):
    """Parsed value. ``success`` is always True."""
    data: T

    @property
    def success(self) -> Literal[True]:
        return True

    @property
    def error(self) -> None:
        return None

    @property
    def issues(self) -> list[ValidationIssue]:
        return []

    def unwrap(self) -> T:
        return self.data

    def unwrap_or(self, default: T) -> T:
        return self.data

    def map(self, f: Callable[[T], U]) -> ParseSuccess[U]:
        return ParseSuccess(f(self.data))

    def match(self, success: Callable[[T], U], failure: Callable[[ValidationError], U]) -> U:
        return success(self.data)

    def __bool__(self) -> bool:
        return True


@final
@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Every issue collected for the input. ``success`` is always False."""
    error: ValidationError

    @property
    def success(self) -> Literal[False]:
        return False

    @property
    def data(self) -> None:
        return None

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.error.issues

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_or(self, default: Any) -> Any:
        return default

    def map(self, f: Callable[[Any], Any]) -> ParseFailure:
        return self

    def match(self, success: Callable[[Any], U], failure: Callable[[ValidationError], U]) -> U:
        return failure(self.error)

    def __bool__(self) -> bool:
        return False


ParseResult = Union[ParseSuccess[T], ParseFailure]
