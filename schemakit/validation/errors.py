"""Validation Error System

Structured issues with paths, codes and messages, accumulated either
fail-fast or collect-all, and raised as one ``ValidationError`` only by the
throwing parse entry point.

Error Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "mode": "collect_all",
        "error_count": 1,
        "errors": [
            {
                "path": ["address", "zip"],
                "field": "address.zip",
                "code": "too_big",
                "message": "String must contain at most 5 character(s)",
                "constraint": "max_length[5]"
            }
        ]
    }
}
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable, Sequence

from schemakit.errors import ErrorInfo, IssueCode
from .options import ValidationMode

PathSegment = Hashable


def format_path(path: Sequence[PathSegment]) -> str:
    """Format a path tuple as a JSON-path-like string.

    ``()`` -> ``"$"``, ``("items", 0, "name")`` -> ``"items[0].name"``.
    """
    if not path:
        return "$"
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int) and not isinstance(segment, bool):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(str(segment))
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One validation failure at one location.

    - path: segments from the root to the offending value (field names,
      indexes, map keys); empty at the root
    - code: issue taxonomy entry
    - message: human-readable message (a per-constraint override if given)
    - constraint: name of the violated constraint, if any
    - params: structured context (minimum, maximum, expected, received, ...)
    """
    path: tuple[PathSegment, ...]
    code: IssueCode
    message: str
    constraint: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def field_path(self) -> str:
        return format_path(self.path)

    def prefixed(self, segment: PathSegment) -> ValidationIssue:
        """Return a copy with ``segment`` prepended to the path."""
        return ValidationIssue(
            path=(segment, *self.path),
            code=self.code,
            message=self.message,
            constraint=self.constraint,
            params=self.params,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result = {
            "path": list(self.path),
            "field": self.field_path,
            "code": self.code.value,
            "message": self.message,
        }
        if self.constraint:
            result["constraint"] = self.constraint
        if self.params:
            result["params"] = dict(self.params)
        return result

    @classmethod
    def from_error_info(cls, info: ErrorInfo, path: Sequence[PathSegment] = ()) -> ValidationIssue:
        return cls(path=tuple(path), code=info.code, message=info.message, params=dict(info.metadata))


def merge(child_issues: Iterable[ValidationIssue], segment: PathSegment) -> tuple[ValidationIssue, ...]:
    """Prefix every child issue with ``segment``, preserving order."""
    return tuple(issue.prefixed(segment) for issue in child_issues)


@dataclass(eq=False)
class ValidationError(Exception):
    """Validation error carrying the full ordered issue list.

    Raised by the throwing parse entry point only; ``safe_parse`` wraps the
    same object inside ``ParseFailure`` instead.
    """
    issues: list[ValidationIssue]
    message: str = "Validation failed"
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.issues:
            return self.message
        if len(self.issues) == 1:
            return f"{(i := self.issues[0]).field_path}: {i.message}"
        return f"{self.message} ({len(self.issues)} issues)"

    @property
    def first_issue(self) -> ValidationIssue | None:
        return self.issues[0] if self.issues else None

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    @property
    def field_errors(self) -> dict[str, list[ValidationIssue]]:
        """Group issues by formatted path."""
        result: dict[str, list[ValidationIssue]] = {}
        for issue in self.issues:
            result.setdefault(issue.field_path, []).append(issue)
        return result

    def get_issues_for_path(self, *path: PathSegment) -> list[ValidationIssue]:
        return [i for i in self.issues if i.path == tuple(path)]

    def flatten(self) -> dict[str, Any]:
        """Split issues into form-level and per-field messages.

        Issues at the root become ``form_errors``; every other issue is
        keyed by its first path segment, which is what a form UI renders.
        """
        form_errors: list[str] = []
        field_errors: dict[str, list[str]] = {}
        for issue in self.issues:
            if not issue.path:
                form_errors.append(issue.message)
            else:
                field_errors.setdefault(str(issue.path[0]), []).append(issue.message)
        return {"form_errors": form_errors, "field_errors": field_errors}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message, "mode": self.mode.value,
            "error_count": len(self.issues), "errors": [i.to_dict() for i in self.issues]}}


class ValidationIssueAccumulator(ABC):
    """Abstract base for issue accumulation strategies."""

    @abstractmethod
    def add(self, issue: ValidationIssue) -> bool:
        """Add an issue. Returns True if validation should continue."""

    @abstractmethod
    def get_issues(self) -> list[ValidationIssue]:
        """Get accumulated issues."""

    @abstractmethod
    def has_issues(self) -> bool:
        """Check if any issues accumulated."""

    @property
    @abstractmethod
    def mode(self) -> ValidationMode:
        """Get the accumulation mode."""

    def extend(self, child_issues: Iterable[ValidationIssue], segment: PathSegment | None = None) -> bool:
        """Add child issues, prefixed with ``segment`` when given.

        Returns False as soon as the accumulator asks to stop.
        """
        issues = merge(child_issues, segment) if segment is not None else child_issues
        for issue in issues:
            if not self.add(issue):
                return False
        return True


@dataclass
class FailFastAccumulator(ValidationIssueAccumulator):
    """Fail-fast accumulator: keeps the first issue and asks to stop."""
    _issue: ValidationIssue | None = None

    @property
    def mode(self) -> ValidationMode:
        return ValidationMode.FAIL_FAST

    def add(self, issue: ValidationIssue) -> bool:
        if self._issue is None:
            self._issue = issue
        return False

    def get_issues(self) -> list[ValidationIssue]:
        return [self._issue] if self._issue else []

    def has_issues(self) -> bool:
        return self._issue is not None


@dataclass
class CollectAllAccumulator(ValidationIssueAccumulator):
    """Collect-all accumulator: gathers every issue in arrival order."""
    _issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def mode(self) -> ValidationMode:
        return ValidationMode.COLLECT_ALL

    def add(self, issue: ValidationIssue) -> bool:
        self._issues.append(issue)
        return True

    def get_issues(self) -> list[ValidationIssue]:
        return self._issues.copy()

    def has_issues(self) -> bool:
        return len(self._issues) > 0


def create_accumulator(mode: ValidationMode) -> ValidationIssueAccumulator:
    """Factory for creating accumulators based on mode."""
    return FailFastAccumulator() if mode == ValidationMode.FAIL_FAST else CollectAllAccumulator()
