"""Validation modes and per-parse configuration."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from schemakit.config import Settings, get_settings
from .coercion import DEFAULT_COERCER, ExplicitCoercion


class ValidationMode(str, Enum):
    """Validation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


class UnknownKeys(str, Enum):
    """What an object schema does with input keys it does not declare.

    STRIP drops them from the output, PASSTHROUGH copies them through
    unvalidated, STRICT reports them as one UNRECOGNIZED_KEYS issue.
    """
    STRIP = "strip"
    PASSTHROUGH = "passthrough"
    STRICT = "strict"


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Configuration for one parse call.

    ``coercer`` supplies the rules used by coercive nodes.
    """
    mode: ValidationMode = ValidationMode.COLLECT_ALL
    unknown_keys: UnknownKeys = UnknownKeys.STRIP
    max_depth: int = 128
    coercer: ExplicitCoercion = DEFAULT_COERCER

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ValidationConfig:
        settings = settings or get_settings()
        return cls(
            mode=ValidationMode(settings.VALIDATION_MODE),
            unknown_keys=UnknownKeys(settings.UNKNOWN_KEYS),
            max_depth=settings.MAX_DEPTH,
        )

    def with_mode(self, mode: ValidationMode | str | None) -> ValidationConfig:
        if mode is None:
            return self
        return replace(self, mode=ValidationMode(mode))
