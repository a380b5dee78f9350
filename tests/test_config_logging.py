"""Tests for settings, per-parse config and logging setup."""

import io
import json
import logging

import pytest
import structlog
from pydantic import ValidationError as SettingsValidationError

from schemakit import string
from schemakit.config import Settings, get_settings
from schemakit.logging import (
    REDACTED,
    LoggerRegistry,
    bind_context,
    clear_context,
    configure_logging,
    engine_logger,
    get_logger,
    redact,
    schema_logger,
    unbind_context,
)
from schemakit.validation import UnknownKeys, ValidationConfig, ValidationMode


class TestSettings:

    def test_defaults(self):
        settings = get_settings()
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_JSON is False
        assert settings.VALIDATION_MODE == "collect_all"
        assert settings.UNKNOWN_KEYS == "strip"
        assert settings.MAX_DEPTH == 128

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SCHEMAKIT_MAX_DEPTH", "16")
        monkeypatch.setenv("SCHEMAKIT_UNKNOWN_KEYS", "strict")
        settings = Settings()
        assert settings.MAX_DEPTH == 16
        assert settings.UNKNOWN_KEYS == "strict"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SCHEMAKIT_VALIDATION_MODE=fail_fast\n")
        assert Settings().VALIDATION_MODE == "fail_fast"

    def test_rejects_out_of_range_depth(self, monkeypatch):
        monkeypatch.setenv("SCHEMAKIT_MAX_DEPTH", "0")
        with pytest.raises(SettingsValidationError):
            Settings()

    def test_cached(self):
        assert get_settings() is get_settings()


class TestValidationConfig:

    def test_from_settings(self):
        config = ValidationConfig.from_settings(Settings(VALIDATION_MODE="fail_fast", UNKNOWN_KEYS="passthrough",
                                                         MAX_DEPTH=10))
        assert config == ValidationConfig(mode=ValidationMode.FAIL_FAST, unknown_keys=UnknownKeys.PASSTHROUGH,
                                          max_depth=10)

    def test_with_mode(self):
        config = ValidationConfig()
        assert config.with_mode(None) is config
        assert config.with_mode("fail_fast").mode is ValidationMode.FAIL_FAST
        assert config.mode is ValidationMode.COLLECT_ALL


@pytest.fixture
def restore_logging():
    library = logging.getLogger("schemakit")
    handlers, level, propagate = library.handlers[:], library.level, library.propagate
    yield
    library.handlers, library.level, library.propagate = handlers, level, propagate
    clear_context()


class TestLogging:

    def test_configure_console(self, restore_logging):
        root_handlers = logging.getLogger().handlers[:]
        handler = configure_logging("debug", json_logs=False, stream=io.StringIO())
        library = logging.getLogger("schemakit")
        assert library.handlers == [handler]
        assert library.level == logging.DEBUG
        assert library.propagate is False
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
        assert logging.getLogger().handlers == root_handlers

    def test_configure_json_from_settings(self, restore_logging, monkeypatch):
        monkeypatch.setenv("SCHEMAKIT_LOG_JSON", "true")
        monkeypatch.setenv("SCHEMAKIT_LOG_LEVEL", "warning")
        get_settings.cache_clear()
        handler = configure_logging(stream=io.StringIO())
        assert logging.getLogger("schemakit").level == logging.WARNING
        assert isinstance(handler.formatter.processors[-1], structlog.processors.JSONRenderer)

    def test_json_output_is_redacted(self, restore_logging):
        stream = io.StringIO()
        configure_logging("info", json_logs=True, stream=stream)
        get_logger("tests").info("checked", password="hunter2", field="email")
        event = json.loads(stream.getvalue().strip())
        assert event["event"] == "checked"
        assert event["password"] == REDACTED
        assert event["field"] == "email"
        assert event["logger"] == "schemakit.tests"
        assert event["library"] == "schemakit"

    def test_redact(self):
        assert redact({
            "event": "x",
            "password": "hunter2",
            "nested": {"Token": "abc", "keep": 1},
            "items": [{"value": 5}],
        }) == {
            "event": "x",
            "password": REDACTED,
            "nested": {"Token": REDACTED, "keep": 1},
            "items": [{"value": REDACTED}],
        }

    def test_context_binding(self, restore_logging):
        bind_context(request_id="r1", user="u1")
        unbind_context("user")
        assert structlog.contextvars.get_contextvars() == {"request_id": "r1"}
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_registry_reuses_loggers(self):
        assert engine_logger() is LoggerRegistry.get("engine")
        assert schema_logger() is not engine_logger()

    def test_configure_leaves_structlog_defaults_alone(self, restore_logging):
        before = structlog.get_config()
        configure_logging("debug", json_logs=True, stream=io.StringIO())
        assert structlog.get_config() == before

    def test_namespace_has_null_handler(self):
        assert any(isinstance(handler, logging.NullHandler) for handler in logging.getLogger("schemakit").handlers)

    @pytest.mark.parametrize("level", [logging.NOTSET, logging.DEBUG])
    def test_unconfigured_failed_parse_prints_nothing(self, restore_logging, capsys, level):
        logging.getLogger("schemakit").setLevel(level)
        assert string().min(3).safe_parse("ab").success is False
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
