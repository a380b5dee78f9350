"""schemakit: declarative schema validation.

    from schemakit import coerce, object_, string, parse

    Filters = object_({"q": string().min(1), "limit": coerce.number().integer().max(100)})
    parse(Filters, {"q": "lisbon", "limit": "20"})  # {'q': 'lisbon', 'limit': 20}
"""
__version__ = "0.1.0"

from .errors import Err, ErrorInfo, IssueCode, Ok, Result, SchemaDepthError, SchemaError
from .validation import (
    ParseFailure,
    ParseResult,
    ParseSuccess,
    SchemaNode,
    UnknownKeys,
    ValidationConfig,
    ValidationError,
    ValidationIssue,
    ValidationMode,
    array,
    as_annotated,
    boolean,
    coerce,
    date,
    map_,
    number,
    object_,
    parse,
    safe_parse,
    set_,
    string,
    to_json_schema,
)

__all__ = [
    "Err",
    "ErrorInfo",
    "IssueCode",
    "Ok",
    "Result",
    "SchemaDepthError",
    "SchemaError",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "SchemaNode",
    "UnknownKeys",
    "ValidationConfig",
    "ValidationError",
    "ValidationIssue",
    "ValidationMode",
    "array",
    "as_annotated",
    "boolean",
    "coerce",
    "date",
    "map_",
    "number",
    "object_",
    "parse",
    "safe_parse",
    "set_",
    "string",
    "to_json_schema",
]
