"""Error Builders

Ergonomic constructors for ``Err[ErrorInfo]`` values used by coercion rules
and checked transforms.
"""
from typing import Any

from .types import Err, ErrorInfo, IssueCode


def error_info(message: str, *, code: IssueCode = IssueCode.CUSTOM, **metadata) -> Err[ErrorInfo]:
    """Create a pipeline error, dropping metadata keys whose value is None."""
    return Err(ErrorInfo(
        code=code,
        message=message,
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def invalid_type(expected: str, received: str, *, message: str | None = None) -> Err[ErrorInfo]:
    return error_info(
        message or f"Expected {expected}, received {received}",
        code=IssueCode.INVALID_TYPE,
        expected=expected,
        received=received,
    )


def invalid_format(expected: str, value: Any = None, *, message: str | None = None) -> Err[ErrorInfo]:
    msg = message or f"Invalid format: expected {expected}"
    if message is None and isinstance(value, str):
        msg += f", got '{value[:50]}'"
    return error_info(msg, code=IssueCode.INVALID_FORMAT, expected=expected)


def custom_error(message: str, **metadata) -> Err[ErrorInfo]:
    return error_info(message, code=IssueCode.CUSTOM, **metadata)
