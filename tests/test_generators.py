"""Tests for JSON Schema export."""

import json
from datetime import date as Date

from schemakit import array, boolean, coerce, date, map_, number, object_, set_, string, to_json_schema
from schemakit.validation import JSONSchemaGenerator
from schemakit.validation.generators import DRAFT_2020_12


class TestJSONSchemaGenerator:

    def test_dialect_at_root_only(self):
        result = to_json_schema(object_({"a": string()}))
        assert result["$schema"] == DRAFT_2020_12
        assert "$schema" not in result["properties"]["a"]
        assert "$schema" not in to_json_schema(string(), include_dialect=False)

    def test_leaf_types(self):
        gen = JSONSchemaGenerator(include_dialect=False)
        assert gen.generate(string()) == {"type": "string"}
        assert gen.generate(number()) == {"type": "number"}
        assert gen.generate(boolean()) == {"type": "boolean"}
        assert gen.generate(date()) == {"type": "string", "anyOf": [{"format": "date"}, {"format": "date-time"}]}

    def test_coercive_leaf_exports_target_type(self):
        assert to_json_schema(coerce.number(), include_dialect=False) == {"type": "number"}

    def test_string_constraints(self):
        schema = string().min(2).max(10).min(3).email()
        assert to_json_schema(schema, include_dialect=False) == {
            "type": "string", "minLength": 3, "maxLength": 10, "format": "email"}

    def test_message_overrides_are_unwrapped(self):
        schema = string().regex(r"^\d+$", "Digits only").uuid("Bad id")
        result = to_json_schema(schema, include_dialect=False)
        assert result["pattern"] == r"^\d+$"
        assert result["format"] == "uuid"

    def test_number_constraints(self):
        schema = number().integer().gt(0).max(100).multiple_of(5)
        assert to_json_schema(schema, include_dialect=False) == {
            "type": "integer", "exclusiveMinimum": 0, "maximum": 100, "multipleOf": 5}

    def test_date_bounds(self):
        result = to_json_schema(date().min(Date(1900, 1, 1)), include_dialect=False)
        assert result["formatMinimum"] == "1900-01-01"

    def test_containers(self):
        gen = JSONSchemaGenerator(include_dialect=False)
        assert gen.generate(array(string()).nonempty()) == {
            "type": "array", "items": {"type": "string"}, "minItems": 1}
        assert gen.generate(set_(number())) == {
            "type": "array", "uniqueItems": True, "items": {"type": "number"}}
        assert gen.generate(map_(string().min(1), number()).max(5)) == {
            "type": "object",
            "additionalProperties": {"type": "number"},
            "propertyNames": {"minLength": 1},
            "maxProperties": 5,
        }

    def test_object(self, user_schema):
        result = to_json_schema(user_schema.strict().describe("A user"), include_dialect=False)
        assert result["type"] == "object"
        assert list(result["properties"]) == ["name", "email", "age"]
        assert result["required"] == ["name", "email"]
        assert result["additionalProperties"] is False
        assert result["description"] == "A user"

    def test_nullable_and_default(self):
        result = to_json_schema(number().nullable().default(3), include_dialect=False)
        assert result == {"anyOf": [{"type": "number", "default": 3}, {"type": "null"}]}

    def test_default_factory_not_called(self):
        calls = []
        schema = array(string()).default_factory(lambda: calls.append(1) or [])
        assert "default" not in to_json_schema(schema, include_dialect=False)
        assert calls == []

    def test_static_default_is_copied(self):
        tags = ["a"]
        result = to_json_schema(array(string()).default(tags), include_dialect=False)
        result["default"].append("b")
        assert tags == ["a"]

    def test_node_json_schema_method(self):
        assert string().json_schema()["$schema"] == DRAFT_2020_12

    def test_generate_json(self, order_schema):
        text = JSONSchemaGenerator().generate_json(order_schema)
        assert json.loads(text)["properties"]["items"]["items"]["required"] == ["sku", "qty"]
