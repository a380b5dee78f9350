"""Declarative Validation System

Schema trees are the single source of truth for the shape of untrusted
input. Parsing follows parse-don't-validate semantics: a successful parse
returns the (possibly coerced and transformed) value, a failed one returns
every issue with its full path.

Key Features:
- Immutable schema nodes with fluent builders
- Compositional validators (AND/OR/NOT combinators)
- Explicit opt-in coercion
- Structured issue accumulation (fail-fast or collect-all)
- Refinements and transforms that run after a subtree validated
- JSON Schema export and a pydantic ``Annotated`` bridge

Usage:
    from schemakit.validation import object_, string, number, ValidationError

    Signup = object_({
        "email": string().email(),
        "age": number().integer().min(13, "Too young"),
    })

    result = Signup.safe_parse(payload)
    if not result.success:
        return {"errors": result.error.flatten()}
    signup = result.data
"""

# Schema nodes and factories
from .schema import (
    SchemaNode,
    LeafSchema,
    StringSchema,
    NumberSchema,
    BooleanSchema,
    DateSchema,
    ArraySchema,
    SetSchema,
    MapSchema,
    ObjectSchema,
)
from .builders import (
    string,
    number,
    boolean,
    date,
    array,
    set_,
    map_,
    object_,
    coerce,
)
from .kinds import SchemaKind
from .options import ValidationMode, UnknownKeys, ValidationConfig

# Compositional validators
from .validators import (
    ValidationResult,
    AtomicValidator,
    StringLength,
    RegexPattern,
    EmailValidator,
    UUIDValidator,
    DateTimeValidator,
    URLValidator,
    IPAddressValidator,
    NumericRange,
    IsInteger,
    MultipleOf,
    Finite,
    DateRange,
    CollectionSize,
    And,
    Or,
    Not,
    WithMessage,
    Predicate,
    CustomValidator,
    custom,
)

# Coercion
from .coercion import (
    CoercionRule,
    ToString,
    ToNumber,
    ToBoolean,
    ToDate,
    ExplicitCoercion,
    DEFAULT_COERCER,
)

# Effects
from .effects import Effect, Refinement, Transform, CheckedTransform

# Issues and results
from .errors import (
    PathSegment,
    ValidationIssue,
    ValidationError,
    ValidationIssueAccumulator,
    FailFastAccumulator,
    CollectAllAccumulator,
    create_accumulator,
    format_path,
    merge,
)
from .result import ParseSuccess, ParseFailure, ParseResult

# Engine entry points
from .engine import parse, safe_parse, parse_node

# Schema generators
from .generators import SchemaGenerator, JSONSchemaGenerator, to_json_schema

# Pydantic integration
from .integration import as_annotated

__all__ = [
    # Schema nodes
    "SchemaNode",
    "LeafSchema",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "DateSchema",
    "ArraySchema",
    "SetSchema",
    "MapSchema",
    "ObjectSchema",
    "SchemaKind",
    # Factories
    "string",
    "number",
    "boolean",
    "date",
    "array",
    "set_",
    "map_",
    "object_",
    "coerce",
    # Options
    "ValidationMode",
    "UnknownKeys",
    "ValidationConfig",
    # Validators
    "ValidationResult",
    "AtomicValidator",
    "StringLength",
    "RegexPattern",
    "EmailValidator",
    "UUIDValidator",
    "DateTimeValidator",
    "URLValidator",
    "IPAddressValidator",
    "NumericRange",
    "IsInteger",
    "MultipleOf",
    "Finite",
    "DateRange",
    "CollectionSize",
    "And",
    "Or",
    "Not",
    "WithMessage",
    "Predicate",
    "CustomValidator",
    "custom",
    # Coercion
    "CoercionRule",
    "ToString",
    "ToNumber",
    "ToBoolean",
    "ToDate",
    "ExplicitCoercion",
    "DEFAULT_COERCER",
    # Effects
    "Effect",
    "Refinement",
    "Transform",
    "CheckedTransform",
    # Issues and results
    "PathSegment",
    "ValidationIssue",
    "ValidationError",
    "ValidationIssueAccumulator",
    "FailFastAccumulator",
    "CollectAllAccumulator",
    "create_accumulator",
    "format_path",
    "merge",
    "ParseSuccess",
    "ParseFailure",
    "ParseResult",
    # Engine
    "parse",
    "safe_parse",
    "parse_node",
    # Generators
    "SchemaGenerator",
    "JSONSchemaGenerator",
    "to_json_schema",
    # Integration
    "as_annotated",
]
