"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from subspacectl.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ours = logging.getLogger("subspacectl")
    our_level = ours.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    ours.setLevel(our_level)
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("subspacectl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("subspacectl").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("subspacectl.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "subspacectl.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_bound_subspace(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with structlog.contextvars.bound_contextvars(subspace="tools"):
            logging.getLogger("subspacectl.services.install").error("Error installing")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Error installing"
        assert parsed["subspace"] == "tools"
        assert parsed["logger"] == "subspacectl.services.install"

    def test_debug_suppressed_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("subspacectl.services.install").debug("hidden")
        assert capfd.readouterr().err == ""

    def test_json_mode_renders_exceptions(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        try:
            raise OSError("disk full")
        except OSError:
            logging.getLogger("subspacectl.services.install").exception("Failed to prepare")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Failed to prepare"
        assert "OSError: disk full" in parsed["exception"]
