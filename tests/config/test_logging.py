"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from specreg.config.logging import (
    LOAD_LOGGERS,
    configure_logging,
    current_load_chain,
    load_context,
)
from specreg.loaders.loader import Loader


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and specreg logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    names = ["specreg", *LOAD_LOGGERS]
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


def _json_lines(err: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("specreg").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("specreg").level == logging.WARNING
        for name in LOAD_LOGGERS:
            assert logging.getLogger(name).level == logging.NOTSET

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("specreg.test")
        log.warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "specreg.test"
        assert "timestamp" in parsed
        assert "loading" not in parsed

    def test_stdlib_loader_logger_is_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("specreg.loaders.loader").debug("Loaded project demo")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Loaded project demo"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "specreg.loaders.loader"

    def test_quiet_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("specreg.loaders.registry").info("Registered task demo::Controller")
        logging.getLogger("ruamel").debug("parser noise")
        assert capfd.readouterr().err == ""

    def test_trace_loads_only_affects_load_loggers(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=False, log_json=True, trace_loads=True)
        logging.getLogger("specreg.loaders.loader").debug("Loading project demo")
        logging.getLogger("specreg.infrastructure.files").debug("Indexed 3 projects")
        logging.getLogger("specreg.services.base").debug("show_project failed")
        events = [line["event"] for line in _json_lines(capfd.readouterr().err)]
        assert events == ["Loading project demo", "Indexed 3 projects"]

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestLoadContext:
    def test_nesting(self) -> None:
        assert current_load_chain() == ()
        with load_context("project", "demo"):
            with load_context("typekit", "base"):
                assert current_load_chain() == ("project:demo", "typekit:base")
            assert current_load_chain() == ("project:demo",)
        assert current_load_chain() == ()

    def test_unwinds_on_error(self) -> None:
        with pytest.raises(RuntimeError), load_context("project", "demo"):
            raise RuntimeError("boom")
        assert current_load_chain() == ()

    def test_records_carry_load_chain(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with load_context("project", "demo"), load_context("project", "base"):
            logging.getLogger("specreg.loaders.loader").debug("Loading typekit base")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["loading"] == "project:demo > project:base"

    def test_loader_logs_nested_loads(
        self, loader: Loader, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True, trace_loads=True)
        loader.load_project("demo")
        lines = _json_lines(capfd.readouterr().err)
        chains = {line["event"]: line.get("loading") for line in lines}
        assert chains["Loading project demo"] == "project:demo"
        assert chains["Loading project base"] == "project:demo > project:base"
        assert chains["Loading typekit base"] == "project:demo > project:base > typekit:base"
