# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Time period strategies for strategy-based line charts."""

from chart_engine.strategies.base import STRATEGY_DISPLAY_MAP, BaseTimePeriodStrategy
from chart_engine.strategies.factory import LEGACY_PERIOD_MAP, StrategyFactory
from chart_engine.strategies.month import MonthStrategy
from chart_engine.strategies.multi_month import MultiMonthStrategy, SixMonthStrategy, ThreeMonthStrategy
from chart_engine.strategies.week import WeekStrategy

__all__ = [
    "STRATEGY_DISPLAY_MAP",
    "LEGACY_PERIOD_MAP",
    "BaseTimePeriodStrategy",
    "StrategyFactory",
    "WeekStrategy",
    "MonthStrategy",
    "MultiMonthStrategy",
    "ThreeMonthStrategy",
    "SixMonthStrategy",
]
