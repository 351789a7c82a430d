"""
Tests for logging_config module.
"""

import logging
from unittest.mock import patch

import pytest

from bard.infra.logging_config import (
    LOGGER_NAME,
    DailyRotatingFileHandler,
    parse_level,
    setup_logging,
)


def log_files(directory):
    return sorted(directory.glob("bard_*.log"))


class TestParseLevel:
    """Tests for parse_level function."""

    @pytest.mark.parametrize("name, level", [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        (" error ", logging.ERROR),
        ("LOUD", logging.INFO),
    ])
    def test_levels(self, name, level):
        assert parse_level(name) == level


class TestDailyRotatingFileHandler:
    """Tests for DailyRotatingFileHandler class."""

    def test_nested_directory_created(self, tmp_path):
        log_dir = tmp_path / "var" / "logs"

        handler = DailyRotatingFileHandler(log_dir=str(log_dir))
        handler.close()

        assert log_dir.is_dir()

    def test_file_name_has_date_and_start_time(self, tmp_path):
        """bard_YYYYMMDD_HHMMSS.log"""
        handler = DailyRotatingFileHandler(log_dir=str(tmp_path))
        handler.close()

        files = log_files(tmp_path)
        assert len(files) == 1
        prefix, date_str, start = files[0].stem.split("_")
        assert prefix == "bard"
        assert date_str.isdigit() and len(date_str) == 8
        assert start.isdigit() and len(start) == 6

    def test_rotates_on_date_change(self, tmp_path):
        """A new day writes to a new file with the same start time."""
        with patch("bard.infra.logging_config._today", return_value="20260101"):
            handler = DailyRotatingFileHandler(log_dir=str(tmp_path))
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger = logging.getLogger("bard.rotation-check")
        logger.propagate = False
        logger.addHandler(handler)

        try:
            with patch("bard.infra.logging_config._today", return_value="20260101"):
                logger.warning("new year")
            with patch("bard.infra.logging_config._today", return_value="20260102"):
                logger.warning("day two")
        finally:
            logger.removeHandler(handler)
            handler.close()

        first, second = log_files(tmp_path)
        assert "_20260101_" in first.name
        assert "_20260102_" in second.name
        assert first.name.rsplit("_", 1)[1] == second.name.rsplit("_", 1)[1]
        assert first.read_text(encoding="utf-8") == "new year\n"
        assert second.read_text(encoding="utf-8") == "day two\n"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_bard_logger(self, tmp_path):
        logger = setup_logging("DEBUG", log_dir=str(tmp_path))

        assert logger is logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert all(handler.level == logging.DEBUG for handler in logger.handlers)

    def test_records_reach_log_file(self, tmp_path):
        logger = setup_logging("INFO", log_dir=str(tmp_path))
        logger.info("[Pipeline] part 1 done")
        for handler in logger.handlers:
            handler.flush()

        content = log_files(tmp_path)[0].read_text(encoding="utf-8")
        assert "INFO - [Pipeline] part 1 done" in content

    def test_stderr_only(self, tmp_path):
        """log_dir=None writes no file."""
        logger = setup_logging("INFO", log_dir=None)

        assert [type(handler) for handler in logger.handlers] == [logging.StreamHandler]

    def test_reconfigure_replaces_handlers(self, tmp_path):
        """A second call swaps handlers instead of stacking them."""
        first = list(setup_logging("INFO", log_dir=str(tmp_path)).handlers)
        logger = setup_logging("WARNING", log_dir=str(tmp_path))

        assert len(logger.handlers) == 2
        assert not set(first) & set(logger.handlers)
        assert logger.level == logging.WARNING
