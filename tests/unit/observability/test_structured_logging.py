"""Unit tests for the structlog helpers."""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from of_launchdarkly.observability import (
    DEFAULT_SENSITIVE_FIELDS,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)


# ---------------------------------------------------------------------------
# SensitiveFieldsFilter
# ---------------------------------------------------------------------------


class TestSensitiveFieldsFilter:
    def test_redacts_sdk_key(self) -> None:
        f = SensitiveFieldsFilter()
        result = f.redact({"sdk_key": "sdk-123", "flag_key": "checkout"})
        assert result["sdk_key"] == SensitiveFieldsFilter.REDACTED
        assert result["flag_key"] == "checkout"

    def test_redacts_all_default_fields(self) -> None:
        f = SensitiveFieldsFilter()
        result = f.redact({field: "value" for field in DEFAULT_SENSITIVE_FIELDS})
        assert set(result.values()) == {SensitiveFieldsFilter.REDACTED}

    def test_match_is_case_insensitive(self) -> None:
        result = SensitiveFieldsFilter().redact({"Authorization": "Bearer x"})
        assert result["Authorization"] == SensitiveFieldsFilter.REDACTED

    def test_custom_fields_replace_defaults(self) -> None:
        f = SensitiveFieldsFilter(frozenset({"email"}))
        result = f.redact({"email": "a@b.c", "sdk_key": "sdk-1"})
        assert result["email"] == SensitiveFieldsFilter.REDACTED
        assert result["sdk_key"] == "sdk-1"

    def test_redact_deep_walks_nested_dicts(self) -> None:
        result = SensitiveFieldsFilter().redact_deep({"config": {"sdk_key": "sdk-1", "offline": True}})
        assert result == {"config": {"sdk_key": SensitiveFieldsFilter.REDACTED, "offline": True}}

    def test_acts_as_structlog_processor(self) -> None:
        event = SensitiveFieldsFilter()(None, "info", {"event": "hello", "token": "t"})
        assert event == {"event": "hello", "token": SensitiveFieldsFilter.REDACTED}


# ---------------------------------------------------------------------------
# get_logger
# ---------------------------------------------------------------------------


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("test", provider="LaunchDarkly").info("started")
        assert logs == [{"event": "started", "log_level": "info", "provider": "LaunchDarkly"}]

    def test_without_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger().warning("careful", flag_key="x")
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["flag_key"] == "x"


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestJsonLoggerFactory:
    @pytest.fixture(autouse=True)
    def _restore_logging(self):  # type: ignore[no-untyped-def]
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_configures_root_handler(self) -> None:
        JsonLoggerFactory.configure(level=logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_renders_json_with_redaction(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure()
        structlog.get_logger("of_launchdarkly.test").info("client built", sdk_key="sdk-secret")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "client built"
        assert payload["sdk_key"] == SensitiveFieldsFilter.REDACTED
        assert payload["logger"] == "of_launchdarkly.test"
        assert payload["level"] == "info"
