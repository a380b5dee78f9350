"""Pydantic Integration

Expose a schema node as an ``Annotated`` type so it can guard a field of a
pydantic model:

    from pydantic import BaseModel
    from schemakit import as_annotated, number, object_, string

    Address = object_({"street": string().min(1), "zip": string().length(5)})

    class Order(BaseModel):
        quantity: as_annotated(number().integer().positive())
        address: as_annotated(Address)

Failures surface as a single pydantic error of type ``schemakit_validation``
whose context carries the issue list.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from pydantic import PlainValidator, WithJsonSchema
from pydantic_core import PydanticCustomError

from .generators import to_json_schema
from .options import ValidationConfig

if TYPE_CHECKING:
    from .schema import SchemaNode

ERROR_TYPE = "schemakit_validation"


def make_validator(node: SchemaNode, config: ValidationConfig | None = None):
    """Return a plain function suitable for ``PlainValidator``."""

    def _validate(value: Any) -> Any:
        result = node.safe_parse(value, config=config)
        if result.success:
            return result.data
        raise PydanticCustomError(ERROR_TYPE, "{summary}", {
            "summary": str(result.error),
            "issues": [issue.to_dict() for issue in result.issues],
        })

    return _validate


def as_annotated(node: SchemaNode, config: ValidationConfig | None = None) -> Any:
    """Wrap ``node`` as ``Annotated[Any, PlainValidator, WithJsonSchema]``."""
    return Annotated[
        Any,
        PlainValidator(make_validator(node, config)),
        WithJsonSchema(to_json_schema(node, include_dialect=False)),
    ]
