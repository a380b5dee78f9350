"""Post-validation effects.

Effects run after a node's type check, constraints and children all passed,
in declaration order. Each returns a Result: ``Ok(value)`` hands the
(possibly new) value to the next effect, ``Err(issues)`` stops the chain.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from schemakit.errors import Err, ErrorInfo, IssueCode, Ok, Result, SchemaError
from .errors import PathSegment, ValidationIssue

EffectOutcome = Result[Any, list[ValidationIssue]]


def _require_callable(fn: Any, what: str) -> None:
    if not callable(fn):
        raise SchemaError(f"{what} must be callable, got {type(fn).__name__}")


class Effect(ABC):
    """A step applied to a fully validated value."""

    @abstractmethod
    def apply(self, value: Any) -> EffectOutcome:
        """Return Ok(new value) or Err(issues relative to the node)."""


@dataclass(frozen=True, slots=True)
class Refinement(Effect):
    """Boolean check on the validated value; failure is one CUSTOM issue."""
    predicate: Callable[[Any], bool]
    message: str = "Invalid input"
    path: tuple[PathSegment, ...] = ()

    def __post_init__(self):
        _require_callable(self.predicate, "Refinement predicate")

    def apply(self, value: Any) -> EffectOutcome:
        if self.predicate(value):
            return Ok(value)
        return Err([ValidationIssue(path=self.path, code=IssueCode.CUSTOM, message=self.message,
            constraint="refine")])


@dataclass(frozen=True, slots=True)
class Transform(Effect):
    """Plain value mapping; it cannot fail."""
    fn: Callable[[Any], Any]

    def __post_init__(self):
        _require_callable(self.fn, "Transform")

    def apply(self, value: Any) -> EffectOutcome:
        return Ok(self.fn(value))


def _issues_from_payload(payload: Any) -> list[ValidationIssue]:
    items: Sequence[Any] = payload if isinstance(payload, (list, tuple)) else [payload]
    issues = []
    for item in items:
        match item:
            case ValidationIssue():
                issues.append(item)
            case ErrorInfo():
                issues.append(ValidationIssue.from_error_info(item))
            case str():
                issues.append(ValidationIssue(path=(), code=IssueCode.CUSTOM, message=item))
            case _:
                raise SchemaError(f"Checked transform returned unsupported error payload: {item!r}")
    if not issues:
        raise SchemaError("Checked transform returned Err with no issues")
    return issues


@dataclass(frozen=True, slots=True)
class CheckedTransform(Effect):
    """Transform that may reject the value.

    ``fn`` returns ``Ok(new_value)`` or ``Err(payload)`` where payload is a
    message, an ``ErrorInfo``, a ``ValidationIssue``, or a list of those.
    Messages become CUSTOM issues.
    """
    fn: Callable[[Any], Result[Any, Any]]

    def __post_init__(self):
        _require_callable(self.fn, "Checked transform")

    def apply(self, value: Any) -> EffectOutcome:
        match self.fn(value):
            case Ok(new_value):
                return Ok(new_value)
            case Err(payload):
                return Err(_issues_from_payload(payload))
            case other:
                raise SchemaError(f"Checked transform must return Ok or Err, got {type(other).__name__}")
