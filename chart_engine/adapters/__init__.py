# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Response store adapters.

``SQLResponseStore`` lives in ``chart_engine.adapters.sql`` and is imported
from there, so the core package can be used without a database.
"""

from chart_engine.adapters.base import BaseResponseStore
from chart_engine.adapters.memory import InMemoryResponseStore

__all__ = ["BaseResponseStore", "InMemoryResponseStore"]
