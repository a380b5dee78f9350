"""Shared fixtures for schemakit tests."""

import pytest

from schemakit import array, coerce, number, object_, string
from schemakit.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Isolate every test from the caller's SCHEMAKIT_* environment and .env file."""
    for name in ("LOG_LEVEL", "LOG_JSON", "VALIDATION_MODE", "UNKNOWN_KEYS", "MAX_DEPTH"):
        monkeypatch.delenv(f"SCHEMAKIT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_schema():
    return object_({
        "name": string().min(1),
        "email": string().email(),
        "age": number().integer().nonnegative().optional(),
    })


@pytest.fixture
def address_schema():
    return object_({
        "street": string().min(1, "Street is required"),
        "zip": string().length(5, "Zip must be 5 characters"),
    })


@pytest.fixture
def order_schema(address_schema):
    return object_({
        "id": coerce.number().integer().positive(),
        "items": array(object_({"sku": string().min(3), "qty": number().integer().min(1)})).nonempty(),
        "address": address_schema,
    })
