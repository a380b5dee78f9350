"""Tests for leaf schemas: type checks, constraints and coercion."""

import math
from datetime import date as Date, datetime

import pytest

from schemakit import ValidationError, boolean, coerce, date, number, string
from schemakit.errors import IssueCode, SchemaError
from schemakit.validation import StringSchema


class TestStringSchema:
    """Test string parsing and constraints."""

    def test_parse_valid(self):
        assert string().parse("hello") == "hello"

    @pytest.mark.parametrize("value,received", [
        (5, "number"),
        (None, "null"),
        (True, "boolean"),
        (["a"], "array"),
    ])
    def test_rejects_other_types(self, value, received):
        result = string().safe_parse(value)
        assert not result.success
        issue = result.error.first_issue
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.message == f"Expected string, received {received}"
        assert issue.path == ()

    def test_single_violation_gives_single_issue(self):
        result = string().min(3).max(10).safe_parse("ab")
        assert len(result.issues) == 1
        assert result.issues[0].code is IssueCode.TOO_SMALL

    def test_every_constraint_is_evaluated(self):
        result = string().min(5).email().safe_parse("ab")
        assert [i.code for i in result.issues] == [IssueCode.TOO_SMALL, IssueCode.INVALID_FORMAT]

    def test_message_override(self):
        result = string().min(3, "Name too short").safe_parse("ab")
        assert result.error.messages == ["Name too short"]

    def test_nonempty(self):
        assert not string().nonempty().safe_parse("").success

    def test_length(self):
        assert string().length(5).parse("12345") == "12345"
        assert string().length(5).safe_parse("1234").issues[0].message == \
            "String must contain exactly 5 character(s)"

    def test_formats(self):
        assert string().url().parse("https://example.com") == "https://example.com"
        assert string().uuid().safe_parse("nope").issues[0].message == "Invalid uuid"
        assert string().regex(r"^[A-Z]{3}$").parse("ABC") == "ABC"
        assert string().datetime().parse("2024-01-15T10:30:00Z") == "2024-01-15T10:30:00Z"
        assert string().ip(version=4).safe_parse("::1").issues[0].code is IssueCode.INVALID_FORMAT

    def test_builders_do_not_mutate(self):
        base = string()
        constrained = base.min(3)
        assert base.constraints == ()
        assert len(constrained.constraints) == 1
        assert isinstance(constrained, StringSchema)

    def test_malformed_construction_raises(self):
        with pytest.raises(SchemaError):
            string().min(-1)
        with pytest.raises(SchemaError):
            string().regex("[")
        with pytest.raises(SchemaError):
            string().check("not a validator")


class TestNumberSchema:
    """Test number parsing and constraints."""

    def test_parse_int_and_float(self):
        assert number().parse(5) == 5
        assert number().parse(2.5) == 2.5

    def test_bool_and_nan_rejected(self):
        assert number().safe_parse(True).issues[0].message == "Expected number, received boolean"
        assert number().safe_parse(math.nan).issues[0].message == "Expected number, received nan"

    def test_string_rejected_without_coercion(self):
        assert number().safe_parse("5").issues[0].code is IssueCode.INVALID_TYPE

    def test_range(self):
        schema = number().min(1).max(10)
        assert schema.parse(1) == 1
        assert schema.safe_parse(0).issues[0].code is IssueCode.TOO_SMALL
        assert schema.safe_parse(11).issues[0].code is IssueCode.TOO_BIG

    def test_exclusive_and_sign_helpers(self):
        assert not number().gt(5).safe_parse(5).success
        assert not number().lt(5).safe_parse(5).success
        assert not number().positive().safe_parse(0).success
        assert number().nonnegative().parse(0) == 0
        assert not number().negative().safe_parse(0).success
        assert number().nonpositive().parse(0) == 0

    def test_integer(self):
        assert number().integer().parse(3) == 3
        assert number().integer().safe_parse(3.5).issues[0].message == "Expected integer, received float"

    def test_multiple_of_and_finite(self):
        assert number().multiple_of(3).safe_parse(10).issues[0].code is IssueCode.NOT_MULTIPLE_OF
        assert number().finite().safe_parse(math.inf).issues[0].code is IssueCode.NOT_FINITE


class TestBooleanSchema:

    def test_parse(self):
        assert boolean().parse(False) is False

    def test_rejects_truthy_values(self):
        assert boolean().safe_parse(1).issues[0].message == "Expected boolean, received number"
        assert boolean().safe_parse("true").issues[0].code is IssueCode.INVALID_TYPE


class TestDateSchema:

    def test_parse_date_and_datetime(self):
        assert date().parse(Date(2024, 1, 1)) == Date(2024, 1, 1)
        assert date().parse(datetime(2024, 1, 1, 9)) == datetime(2024, 1, 1, 9)

    def test_string_rejected_without_coercion(self):
        assert date().safe_parse("2024-01-01").issues[0].message == "Expected date, received string"

    def test_bounds(self):
        schema = date().min(Date(1900, 1, 1), "Too old").max(Date(2030, 1, 1), "Too young")
        assert schema.safe_parse(Date(1800, 1, 1)).error.messages == ["Too old"]
        assert schema.safe_parse(Date(2031, 1, 1)).error.messages == ["Too young"]


class TestCoercion:
    """Test coercive leaves built through the coerce namespace."""

    def test_coerce_number_with_range(self):
        assert coerce.number().min(1000).max(1000000).parse("100000") == 100000

    def test_coerce_number_failure_is_single_invalid_type(self):
        result = coerce.number().min(1000).safe_parse("abc")
        assert len(result.issues) == 1
        assert result.issues[0].code is IssueCode.INVALID_TYPE
        assert result.issues[0].message == "Expected number, received 'abc'"

    def test_constraints_run_on_coerced_value(self):
        assert coerce.number().min(1000).safe_parse("999").issues[0].code is IssueCode.TOO_SMALL

    def test_coerce_string(self):
        assert coerce.string().parse(42) == "42"
        assert coerce.string().max(2).safe_parse(12345).issues[0].code is IssueCode.TOO_BIG

    def test_coerce_boolean(self):
        assert coerce.boolean().parse("TRUE") is True
        assert not coerce.boolean().safe_parse("yes").success

    def test_coerce_date(self):
        schema = coerce.date().min(Date(1900, 1, 1)).max(Date(2030, 1, 1))
        assert schema.parse("1990-01-01") == Date(1990, 1, 1)
        assert schema.safe_parse("2040-01-01").issues[0].code is IssueCode.TOO_BIG

    def test_coerce_method_matches_namespace(self):
        assert number().coerce().parse("7") == 7
        assert number().coerce() == coerce.number()


class TestPresence:
    """Test nullable and defaults on leaves."""

    def test_nullable(self):
        assert string().nullable().parse(None) is None
        assert not string().safe_parse(None).success

    def test_nullable_skips_constraints(self):
        assert string().min(3).nullable().parse(None) is None

    def test_describe(self):
        assert string().describe("Display name").description == "Display name"

    def test_default_factory_must_be_callable(self):
        with pytest.raises(SchemaError):
            string().default_factory("x")


class TestValidationErrorRaised:

    def test_parse_raises_with_issues(self):
        with pytest.raises(ValidationError) as exc_info:
            string().email().parse("nope")
        assert exc_info.value.issues[0].message == "Invalid email"
        assert str(exc_info.value) == "$: Invalid email"
