"""End-to-end usage scenarios: signup and address forms built from schemas."""

from datetime import date as Date

import pytest

from schemakit import (
    Err,
    Ok,
    ValidationError,
    array,
    boolean,
    coerce,
    map_,
    number,
    object_,
    set_,
    string,
)
from schemakit.errors import IssueCode


def must_be_uppercase(value: str):
    if value != value.upper():
        return Err("Must be uppercase")
    return Ok(value)


class TestPrimitiveUsage:

    def test_string_with_length(self):
        assert string().min(3).max(100).parse("Iqbal") == "Iqbal"

    def test_primitive_types(self):
        assert string().email().parse("iqbal@test.com") == "iqbal@test.com"
        assert boolean().parse(True) is True
        assert number().min(1000).max(1000000).parse(100000) == 100000

    def test_conversion(self):
        assert coerce.string().min(3).max(100).parse(123) == "123"
        assert coerce.boolean().parse("true") is True
        assert coerce.number().min(1000).max(1000000).parse("100000") == 100000

    def test_birth_date(self):
        schema = coerce.date().min(Date(1990, 1, 1)).max(Date(2020, 1, 1))
        assert schema.parse("1990-01-01") == Date(1990, 1, 1)
        assert schema.parse(Date(1990, 1, 1)) == Date(1990, 1, 1)
        assert schema.safe_parse("1989-12-31").issues[0].code is IssueCode.TOO_SMALL


class TestErrorReporting:

    def test_error_lists_every_message(self):
        with pytest.raises(ValidationError) as exc_info:
            string().email().min(3).max(100).parse("Iqbal")
        assert exc_info.value.messages == ["Invalid email"]

    def test_safe_parse_without_exception(self):
        result = string().email().min(3).max(100).safe_parse("iqbal@test.com")
        assert result.success
        assert result.data == "iqbal@test.com"


class TestObjectUsage:

    def test_login(self):
        login = object_({"email": string().email(), "password": string().min(6).max(100)})
        request = {"email": "iqbal@test.com", "password": "password"}
        assert login.parse(request) == request

    def test_nested_object(self):
        create_user = object_({
            "id": string().max(100),
            "name": string().max(100),
            "address": object_({
                "street": string().max(100),
                "city": string().max(100),
                "zip": string().max(100),
                "country": string().max(100),
            }),
        })
        request = {
            "id": "1",
            "name": "Iqbal",
            "address": {"street": "Jl. Sana Sini", "city": "Jakarta", "zip": "12345", "country": "Indonesia"},
        }
        assert create_user.parse(request) == request

    def test_custom_messages(self):
        login = object_({
            "email": string().email("Email tidak valid"),
            "password": string().min(6, "Password minimal 6 karakter").max(100, "Password maksimal 100 karakter"),
        })
        result = login.safe_parse({"email": "iqbal", "password": "pass"})
        assert result.error.messages == ["Email tidak valid", "Password minimal 6 karakter"]
        assert result.error.flatten()["field_errors"] == {
            "email": ["Email tidak valid"],
            "password": ["Password minimal 6 karakter"],
        }

    def test_optional_last_name(self):
        register = object_({
            "email": string().email(),
            "password": string().min(6).max(20),
            "first_name": string().min(3).max(100),
            "last_name": string().min(3).max(100).optional(),
        })
        request = {"email": "iqbal@example.com", "password": "password", "first_name": "Iqbal"}
        assert register.parse(request) == request


class TestCollectionUsage:

    def test_array_of_emails(self):
        schema = array(string().email()).min(1).max(10)
        request = ["iqbal@test.com", "pamula@test.com", "baiq@test.com"]
        assert schema.parse(request) == request

    def test_set_of_emails(self):
        schema = set_(string().email()).min(1).max(10)
        result = schema.parse({"iqbal@test.com", "pamula@test.com", "pamula@test.com"})
        assert result == {"iqbal@test.com", "pamula@test.com"}

    def test_map_of_emails(self):
        schema = map_(string(), string().email())
        request = {"iqbal": "iqbal@example.com", "pamula": "Pamula@example.com"}
        assert schema.parse(request) == request


class TestTransformUsage:

    def test_transform_upper(self):
        assert string().transform(str.upper).parse("iqbal") == "IQBAL"

    def test_custom_validation(self):
        login = object_({
            "email": string().email().try_transform(must_be_uppercase),
            "password": string().min(6).max(20),
        })
        with pytest.raises(ValidationError) as exc_info:
            login.parse({"email": "iqbal@example.com", "password": "password"})
        issue = exc_info.value.first_issue
        assert issue.code is IssueCode.CUSTOM
        assert issue.message == "Must be uppercase"
        assert issue.path == ("email",)

    def test_custom_validation_passes(self):
        login = object_({"email": string().email().try_transform(must_be_uppercase)})
        assert login.parse({"email": "IQBAL@EXAMPLE.COM"}) == {"email": "IQBAL@EXAMPLE.COM"}
