"""Tests for logging and settings setup."""

from datetime import datetime

from loguru import logger

from weekplanner.config.settings import Settings
from weekplanner.core import logger as logger_module
from weekplanner.core.logger import setup_logger, setup_logger_from_settings
from weekplanner.planning.transport import compare_transport


class TestSetupLogger:
    def test_file_sink(self, tmp_path):
        """Test a log file is created and receives records."""
        log_file = tmp_path / "logs" / "planner.log"

        setup_logger(level="DEBUG", log_file=str(log_file))
        logger.debug("week plan built")
        setup_logger()

        content = log_file.read_text()
        assert "Logger initialized with level=DEBUG" in content
        assert "week plan built" in content

    def test_level_filters_file_sink(self, tmp_path):
        """Test records below the configured level are dropped."""
        log_file = tmp_path / "planner.log"

        setup_logger(level="WARNING", log_file=str(log_file))
        logger.info("not written")
        logger.warning("written")
        setup_logger()

        content = log_file.read_text()
        assert "not written" not in content
        assert "written" in content

    def test_transport_comparisons_quiet_by_default(self, tmp_path, preferences):
        """Test per-leg transport debug records are filtered unless overridden."""
        quiet_file = tmp_path / "quiet.log"
        verbose_file = tmp_path / "verbose.log"

        setup_logger(level="DEBUG", log_file=str(quiet_file))
        compare_transport("Kfar Saba", "Beit Dagan", datetime(2024, 1, 15, 12, 0), preferences)
        setup_logger(level="DEBUG", log_file=str(verbose_file), module_levels={})
        compare_transport("Kfar Saba", "Beit Dagan", datetime(2024, 1, 15, 12, 0), preferences)
        setup_logger()

        assert "Transport comparison" not in quiet_file.read_text()
        assert "Transport comparison" in verbose_file.read_text()

    def test_from_settings(self, monkeypatch, tmp_path):
        """Test LOG_LEVEL / LOG_FILE drive the setup."""
        log_file = tmp_path / "from_settings.log"
        monkeypatch.setattr(logger_module.settings, "log_level", "ERROR")
        monkeypatch.setattr(logger_module.settings, "log_file", str(log_file))

        setup_logger_from_settings()
        logger.warning("dropped")
        logger.error("kept")
        setup_logger()

        content = log_file.read_text()
        assert "dropped" not in content
        assert "kept" in content


class TestSettings:
    def test_invalid_log_level_defaults_to_info(self, monkeypatch):
        """Test unknown log levels fall back to INFO."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert Settings().log_level == "INFO"

    def test_log_level_is_upper_cased(self, monkeypatch):
        """Test log levels are normalized."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings().log_level == "DEBUG"

    def test_negative_retries_clamped(self, monkeypatch):
        """Test negative retry counts become 0."""
        monkeypatch.setenv("SUMMARIZER_MAX_RETRIES", "-3")
        assert Settings().summarizer_max_retries == 0

    def test_summarizer_defaults(self, monkeypatch):
        """Test summarizer defaults."""
        for name in ("SUMMARIZER_MODEL", "SUMMARIZER_TEMPERATURE", "SUMMARIZER_MAX_RETRIES"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.summarizer_model == "gpt-4o-mini"
        assert settings.summarizer_temperature == 0.3
        assert settings.summarizer_max_retries == 2
