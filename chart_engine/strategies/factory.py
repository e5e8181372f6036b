# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Registry of time period strategies."""

import logging
from typing import Dict, Iterable, List, Optional

from chart_engine.errors import StrategyNotFoundError
from chart_engine.models import StrategyOption
from chart_engine.strategies.base import BaseTimePeriodStrategy
from chart_engine.strategies.month import MonthStrategy
from chart_engine.strategies.multi_month import SixMonthStrategy, ThreeMonthStrategy
from chart_engine.strategies.week import WeekStrategy

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = "week"

# Period codes used by older dashboard links
LEGACY_PERIOD_MAP: Dict[str, str] = {
    "1w": "week",
    "1m": "month",
    "3m": "3month",
    "6m": "6month",
}


def default_strategies() -> List[BaseTimePeriodStrategy]:
    return [WeekStrategy(), MonthStrategy(), ThreeMonthStrategy(), SixMonthStrategy()]


class StrategyFactory:
    """
    Name -> strategy registry.

    Each service owns its own factory; it starts out with the built-in
    week, month, 3month and 6month strategies unless others are given.
    """

    def __init__(self, strategies: Optional[Iterable[BaseTimePeriodStrategy]] = None):
        self._strategies: Dict[str, BaseTimePeriodStrategy] = {}
        for strategy in (default_strategies() if strategies is None else strategies):
            self.register_strategy(strategy)
        logger.debug("Strategy factory initialized with %d strategies", len(self._strategies))

    def register_strategy(self, strategy: BaseTimePeriodStrategy) -> None:
        name = strategy.get_strategy_name()
        if name in self._strategies:
            logger.warning("Overwriting existing strategy: %s", name)
        self._strategies[name] = strategy

    def get_strategy(self, name: str) -> Optional[BaseTimePeriodStrategy]:
        """Strategy by name, or None (with a warning) when unknown"""
        strategy = self._strategies.get(name)
        if strategy is None:
            logger.warning("Strategy not found: %s", name)
        return strategy

    def require_strategy(self, name: str, category: str = "") -> BaseTimePeriodStrategy:
        """
        Strategy by name.

        Raises:
            StrategyNotFoundError: If no strategy is registered under ``name``.
        """
        strategy = self._strategies.get(name)
        if strategy is None:
            raise StrategyNotFoundError(name, category)
        return strategy

    def has_strategy(self, name: str) -> bool:
        return name in self._strategies

    def get_all_strategies(self) -> List[BaseTimePeriodStrategy]:
        return list(self._strategies.values())

    def get_strategy_options(self) -> List[StrategyOption]:
        """Selector options in registration order"""
        options = []
        for name, strategy in self._strategies.items():
            info = strategy.get_display_info()
            options.append(StrategyOption(value=name, label=info.label, description=info.description))
        return options

    def get_default_strategy(self) -> BaseTimePeriodStrategy:
        return self.require_strategy(DEFAULT_STRATEGY)

    @staticmethod
    def is_legacy_period(code: str) -> bool:
        return code in LEGACY_PERIOD_MAP

    @staticmethod
    def map_legacy_period_to_strategy(code: str) -> str:
        """Translate ``1w``/``1m``/``3m``/``6m``; anything else maps to ``week``"""
        return LEGACY_PERIOD_MAP.get(code, DEFAULT_STRATEGY)

    def __contains__(self, name: str) -> bool:
        return self.has_strategy(name)

    def __len__(self) -> int:
        return len(self._strategies)
