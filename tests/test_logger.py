"""
Tests for logging helpers.
"""

import json
import logging
import sys

import pytest

from chart_engine.config import ChartEngineSettings
from chart_engine.logger import JSONFormatter, get_logger, log_timing, setup_logging_from_env


@pytest.fixture
def clean_logger():
    """Remove handlers added to test loggers"""
    names = []

    def reset(name):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)

    def register(name):
        names.append(name)
        reset(name)
        return name

    yield register

    for name in names:
        reset(name)


class TestGetLogger:
    """Test logger configuration"""

    def test_handlers_not_duplicated(self, clean_logger):
        name = clean_logger("chart_engine.tests.dup")

        first = get_logger(name)
        second = get_logger(name, level="DEBUG")

        assert first is second
        assert len(first.handlers) == 1

    def test_log_file_receives_json(self, clean_logger, tmp_path):
        name = clean_logger("chart_engine.tests.file")
        log_file = tmp_path / "logs" / "engine.log"

        logger = get_logger(name, log_file=str(log_file))
        logger.info("cache warmed")
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip())
        assert entry["message"] == "cache warmed"
        assert entry["level"] == "INFO"

    def test_setup_from_env(self, clean_logger, monkeypatch):
        clean_logger("chart_engine")
        monkeypatch.setenv("DEBUG", "true")

        logger = setup_logging_from_env(ChartEngineSettings(_env_file=None))

        assert logger.name == "chart_engine"
        assert logger.level == logging.DEBUG

    def test_setup_uses_settings(self, clean_logger, monkeypatch):
        """Level and JSON output come from the log settings"""
        clean_logger("chart_engine")
        monkeypatch.delenv("DEBUG", raising=False)
        monkeypatch.setenv("CHART_ENGINE_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("CHART_ENGINE_LOG_JSON", "true")

        logger = setup_logging_from_env(ChartEngineSettings(_env_file=None))

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestJSONFormatter:
    def test_exception_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "failed"
        assert "ValueError: bad" in entry["exception"]


class TestLogTiming:
    """Test the timing decorator"""

    def test_sync(self):
        @log_timing
        def add(a, b):
            return a + b

        assert add(1, 2) == 3
        assert add.__name__ == "add"

    @pytest.mark.asyncio
    async def test_async_failure_logged_and_reraised(self, caplog):
        @log_timing
        async def fail():
            raise RuntimeError("store down")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                await fail()

        assert "Call failed" in caplog.text
