# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Logging setup for the chart engine.
Provides colored console output, JSON logging and timing of slow calls.
"""

import asyncio
import json
import logging
import os
import sys
import time
from datetime import datetime
from functools import wraps
from typing import Optional

from chart_engine.config import ChartEngineSettings, get_settings


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colored output for console"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        # Work on a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per log line"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def get_logger(name: str, level: str = "INFO", json_format: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines on the console instead of colored text
        log_file: Optional path that additionally receives JSON lines

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    if json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    logger.addHandler(console_handler)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    return logger


def setup_logging_from_env(settings: Optional[ChartEngineSettings] = None) -> logging.Logger:
    """
    Setup the chart_engine logger from settings

    ``log_level`` and ``log_json`` come from ``CHART_ENGINE_LOG_LEVEL`` and
    ``CHART_ENGINE_LOG_JSON``; ``DEBUG=true`` forces debug level.
    """
    settings = settings or get_settings()
    log_level = settings.log_level
    if os.getenv('DEBUG', 'false').lower() == 'true':
        log_level = 'DEBUG'

    return get_logger('chart_engine', level=log_level, json_format=settings.log_json)


def log_timing(func):
    """Decorator to log calls with their duration"""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        start_time = time.time()
        logger.debug("Call started: %s", func.__qualname__)
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            duration = time.time() - start_time
            logger.error("Call failed: %s (took %.2fs) - %s", func.__qualname__, duration, e)
            raise
        duration = time.time() - start_time
        logger.debug("Call completed: %s (took %.2fs)", func.__qualname__, duration)
        return result

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        start_time = time.time()
        logger.debug("Call started: %s", func.__qualname__)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.time() - start_time
            logger.error("Call failed: %s (took %.2fs) - %s", func.__qualname__, duration, e)
            raise
        duration = time.time() - start_time
        logger.debug("Call completed: %s (took %.2fs)", func.__qualname__, duration)
        return result

    if asyncio.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
