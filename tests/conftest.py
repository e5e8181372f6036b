# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Pytest configuration and fixtures for all tests.

This file ensures the project root is in the Python path
so that imports work correctly for all test modules.
"""

import sys
from datetime import date, datetime
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest

from chart_engine.config import ChartEngineSettings
from tests.factories import REFERENCE_DATE, FakeClock, make_record


@pytest.fixture
def project_root_path():
    """Return the project root path."""
    return project_root


@pytest.fixture
def reference_date() -> date:
    return REFERENCE_DATE


@pytest.fixture
def clock() -> FakeClock:
    """Clock at noon on the reference date"""
    return FakeClock(datetime(REFERENCE_DATE.year, REFERENCE_DATE.month, REFERENCE_DATE.day, 12, 0))


@pytest.fixture
def settings() -> ChartEngineSettings:
    """Default settings, independent of any .env file"""
    return ChartEngineSettings(_env_file=None)


@pytest.fixture
def record_factory():
    return make_record
