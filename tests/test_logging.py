"""Tests for iolauncher.logging module."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest

from iolauncher.logging import _get_log_level, _init_logging, get_logger, set_debug


class TestGetLogLevel:
    """Tests for _get_log_level function."""

    def test_default_is_warning(self) -> None:
        """Default log level is WARNING when no env var set."""
        with patch.dict(os.environ, {}, clear=True):
            assert _get_log_level() == logging.WARNING

    @pytest.mark.parametrize("value", ["1", "true", "yes", "TRUE"])
    def test_debug_enabled(self, value: str) -> None:
        """IOLAUNCH_DEBUG truthy values enable debug logging."""
        with patch.dict(os.environ, {"IOLAUNCH_DEBUG": value}):
            assert _get_log_level() == logging.DEBUG

    def test_invalid_value_is_warning(self) -> None:
        """Invalid IOLAUNCH_DEBUG value defaults to WARNING."""
        with patch.dict(os.environ, {"IOLAUNCH_DEBUG": "invalid"}):
            assert _get_log_level() == logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_prefixes_with_namespace(self) -> None:
        """Logger names are prefixed with 'iolauncher' if not already."""
        assert get_logger("my_module").name == "iolauncher.my_module"

    def test_prefix_not_duplicated(self) -> None:
        """Logger names starting with 'iolauncher' are not double-prefixed."""
        assert get_logger("iolauncher.docker").name == "iolauncher.docker"

    def test_caches_loggers(self) -> None:
        """Same logger is returned for same name."""
        assert get_logger("cached_module") is get_logger("cached_module")


class TestSetDebug:
    """Tests for set_debug function."""

    def test_enable_and_disable(self) -> None:
        """set_debug toggles the namespace level."""
        set_debug(True)
        assert logging.getLogger("iolauncher").level == logging.DEBUG
        set_debug(False)
        assert logging.getLogger("iolauncher").level == logging.WARNING


class TestInitLogging:
    """Tests for _init_logging function."""

    def test_idempotent(self) -> None:
        """_init_logging can be called repeatedly and keeps a handler."""
        _init_logging()
        _init_logging()
        assert len(logging.getLogger("iolauncher").handlers) >= 1

    def test_logger_respects_level(self, caplog: pytest.LogCaptureFixture) -> None:
        """Debug messages are dropped at WARNING level."""
        set_debug(False)
        with caplog.at_level(logging.WARNING, logger="iolauncher"):
            logger = get_logger("level_test")
            logger.debug("Debug message")
            logger.warning("Warning message")
            assert "Debug message" not in caplog.text
            assert "Warning message" in caplog.text
