"""Monadic Error Handling

Result types, the issue-code taxonomy and programmer-error exceptions.

Usage:
    from schemakit.errors import Ok, Err, ErrorInfo, IssueCode

    def parse_port(raw: str) -> Result[int, ErrorInfo]:
        if not raw.isdigit():
            return invalid_format("port number", raw)
        return Ok(int(raw))

    match parse_port("80"):
        case Ok(port):
            ...
        case Err(info):
            log.warning(info.message, code=info.code.value)
"""
from .types import (
    Result,
    Ok,
    Err,
    ErrorInfo,
    IssueCode,
    SchemaError,
    SchemaDepthError,
)

from .builders import (
    error_info,
    invalid_type,
    invalid_format,
    custom_error,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "ErrorInfo",
    "IssueCode",
    "SchemaError",
    "SchemaDepthError",
    "error_info",
    "invalid_type",
    "invalid_format",
    "custom_error",
]
