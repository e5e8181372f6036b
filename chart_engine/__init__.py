# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Chart engine for pillar dashboards.

Turns dated pillar responses into line chart points and donut slices under
selectable time period views, with minimum-data thresholds, target lines and
a TTL cache.
"""

from chart_engine.adapters import BaseResponseStore, InMemoryResponseStore
from chart_engine.cache import CacheEntry, ChartCache
from chart_engine.config import ChartEngineSettings, TargetPolicy, get_settings
from chart_engine.errors import (
    ChartTransformationError,
    ConfigurationError,
    DataSourceError,
    ErrorCode,
    InsufficientDataError,
    StrategyNotFoundError,
    TransformerNotFoundError,
)
from chart_engine.models import (
    ChartType,
    DataStatus,
    DataType,
    DonutSlice,
    LineChartPoint,
    PieBreakdown,
    ResponseRecord,
    StrategyDateRange,
    StrategyPeriod,
    TimePeriod,
)
from chart_engine.service import ChartTransformationService
from chart_engine.strategies import StrategyFactory
from chart_engine.transformers import BasePillarTransformer, SafetyTransformer

__all__ = [
    "ChartTransformationService",
    "BaseResponseStore",
    "InMemoryResponseStore",
    "ChartCache",
    "CacheEntry",
    "ChartEngineSettings",
    "TargetPolicy",
    "get_settings",
    "StrategyFactory",
    "BasePillarTransformer",
    "SafetyTransformer",
    "ChartType",
    "DataType",
    "PieBreakdown",
    "ResponseRecord",
    "LineChartPoint",
    "DonutSlice",
    "StrategyDateRange",
    "StrategyPeriod",
    "TimePeriod",
    "DataStatus",
    "ErrorCode",
    "ChartTransformationError",
    "InsufficientDataError",
    "ConfigurationError",
    "StrategyNotFoundError",
    "TransformerNotFoundError",
    "DataSourceError",
]
