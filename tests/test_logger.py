"""Tests for logging configuration."""

import logging
import tempfile
from pathlib import Path

import pytest

from analemma_calc.config import LoggingConfig
from analemma_calc.diagnostics import DiagnosticsObserver
from analemma_calc.logger import get_logger, setup_logger
from analemma_calc.models import AnalemmaPoint


@pytest.fixture
def temp_dir():
    """Create temporary log directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def restore_loggers():
    """Leave the package loggers as they were before each test."""
    package = logging.getLogger("analemma_calc")
    diagnostics = logging.getLogger("analemma_calc.diagnostics")
    handlers, level = list(package.handlers), package.level
    diagnostics_level = diagnostics.level
    yield
    for handler in package.handlers:
        if handler not in handlers:
            handler.close()
    package.handlers[:] = handlers
    package.setLevel(level)
    diagnostics.setLevel(diagnostics_level)


def _visible_point():
    return AnalemmaPoint("2024-01-01", 0.1, -0.8, 0.59, 36.2, 172.9, True)


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_level_and_console_handler(self):
        """Test the configured level with a single console handler."""
        logger = setup_logger(LoggingConfig(level="WARNING"))
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert not get_logger("analemma_calc.series").isEnabledFor(logging.INFO)

    def test_file_handler(self, temp_dir):
        """Test that records reach the rotating log file."""
        log_file = temp_dir / "logs" / "analemma.log"
        logger = setup_logger(LoggingConfig(level="INFO", file=log_file))
        assert len(logger.handlers) == 2

        get_logger("analemma_calc.main").info("session opened")
        for handler in logger.handlers:
            handler.flush()
        assert "session opened" in log_file.read_text(encoding="utf-8")

    def test_unwritable_log_file(self, temp_dir):
        """Test falling back to console logging when the file cannot be opened."""
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")
        logger = setup_logger(LoggingConfig(file=blocker / "analemma.log"))
        assert len(logger.handlers) == 1

    def test_diagnostics_enabled_below_package_level(self, temp_dir):
        """Test that diagnostics summaries are written while the package stays at INFO."""
        log_file = temp_dir / "analemma.log"
        logger = setup_logger(LoggingConfig(level="INFO", file=log_file, diagnostics=True))

        assert get_logger("analemma_calc.diagnostics").isEnabledFor(logging.DEBUG)
        assert not get_logger("analemma_calc.series").isEnabledFor(logging.DEBUG)

        DiagnosticsObserver().observe("london", [_visible_point()])
        for handler in logger.handlers:
            handler.flush()
        assert "Series summary [london]" in log_file.read_text(encoding="utf-8")

    def test_diagnostics_disabled(self, temp_dir):
        """Test that summaries are filtered out at INFO without diagnostics."""
        log_file = temp_dir / "analemma.log"
        logger = setup_logger(LoggingConfig(level="INFO", file=log_file))

        DiagnosticsObserver().observe("london", [_visible_point()])
        for handler in logger.handlers:
            handler.flush()
        assert "Series summary" not in log_file.read_text(encoding="utf-8")
