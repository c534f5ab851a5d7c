"""Unit tests for structlog configuration."""

import json
import logging
from types import SimpleNamespace

import pytest
import structlog

from infrastructure.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_json_renderer_without_tty(self, monkeypatch):
        """Non-interactive output is rendered as JSON."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr(
            "infrastructure.logging.sys",
            SimpleNamespace(stdout=SimpleNamespace(isatty=lambda: False)),
        )

        configure_logging("info")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_force_color_uses_console(self, monkeypatch):
        """FORCE_COLOR switches to the console renderer."""
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging("info")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filtering(self, monkeypatch):
        """Events below the configured level are dropped."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        configure_logging("warning")

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.WARNING)

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)

        configure_logging("chatty")

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.INFO)

    def test_explicit_json_ignores_force_color(self, monkeypatch):
        """log_format=json wins over the environment."""
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging("info", log_format="json")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_events_are_tagged_with_service(self, monkeypatch, capsys):
        """Every rendered event names the service."""
        configure_logging("info", log_format="json")

        structlog.get_logger().info("task_created", task_id="T1")

        line = capsys.readouterr().out.strip()
        assert json.loads(line)["service"] == "tasks-api"
        assert json.loads(line)["event"] == "task_created"
