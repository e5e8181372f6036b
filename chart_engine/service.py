# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Chart transformation service - main entry point for pillar chart data."""

import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from chart_engine.adapters.base import BaseResponseStore
from chart_engine.aggregation import get_date_range
from chart_engine.cache import ChartCache, Clock
from chart_engine.config import ChartEngineSettings, get_settings
from chart_engine.date_ranges import DateLike, format_date_string, to_date
from chart_engine.errors import (
    ChartTransformationError,
    ConfigurationError,
    DataSourceError,
    InsufficientDataError,
    TransformerNotFoundError,
)
from chart_engine.logger import log_timing
from chart_engine.models import (
    ChartType,
    DataStatus,
    DonutSlice,
    LineChartPoint,
    PieBreakdown,
    ResponseRecord,
    TimePeriod,
)
from chart_engine.strategies.factory import StrategyFactory
from chart_engine.targets import apply_target, resolve_target
from chart_engine.transformers import default_transformers
from chart_engine.transformers.base import BasePillarTransformer

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30
DAILY_AGGREGATION_MAX_DAYS = 30


class ChartTransformationService:
    """
    Main service for turning stored pillar responses into chart data.

    Usage:
        async with ChartTransformationService(store) as service:
            points = await service.get_line_chart_data_with_strategy("safety", "month")

    Every get follows the same path: serve a fresh cache entry without I/O,
    otherwise fetch records, check there are enough of them, fold them and
    cache the result. Too little data is not an error for callers; the get
    returns ``[]`` so the dashboard can show its placeholder.
    """

    def __init__(
        self,
        store: BaseResponseStore,
        settings: Optional[ChartEngineSettings] = None,
        strategy_factory: Optional[StrategyFactory] = None,
        transformers: Optional[Iterable[BasePillarTransformer]] = None,
        cache: Optional[ChartCache] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize chart transformation service.

        Args:
            store: Adapter for fetching stored responses
            settings: Engine settings (default: environment settings)
            strategy_factory: Time period strategies (default: the built-ins)
            transformers: Pillar transformers (default: safety)
            cache: Chart cache (default: a new cache using ``settings.cache``)
            clock: Current time, shared with the default cache
        """
        self.store = store
        self.settings = settings or get_settings()
        self.strategies = strategy_factory or StrategyFactory()
        self._clock = clock or datetime.now
        self.cache = cache or ChartCache(self.settings.cache, clock=self._clock)
        self._transformers: Dict[str, BasePillarTransformer] = {}
        for transformer in (default_transformers() if transformers is None else transformers):
            self.register_transformer(transformer)

    # Lifecycle

    async def start(self) -> None:
        """Start periodic cache cleanup"""
        await self.cache.start()

    async def stop(self) -> None:
        """Stop periodic cache cleanup"""
        await self.cache.stop()

    async def __aenter__(self) -> "ChartTransformationService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    # Registry

    def register_transformer(self, transformer: BasePillarTransformer) -> None:
        if transformer.category in self._transformers:
            logger.warning("Overwriting transformer for pillar: %s", transformer.category)
        self._transformers[transformer.category] = transformer

    def get_transformer(self, category: str, chart_type: Union[ChartType, str] = ChartType.LINE) -> BasePillarTransformer:
        """
        Transformer registered for a pillar.

        Raises:
            TransformerNotFoundError: If the pillar has no transformer.
        """
        transformer = self._transformers.get(category)
        if transformer is None:
            raise TransformerNotFoundError(category, chart_type)
        return transformer

    # Chart data

    async def get_line_chart_data(self, category: str, months: Optional[int] = None) -> List[LineChartPoint]:
        """
        Monthly averaged line chart (daily when the window is 30 days or less).

        Args:
            category: Pillar name
            months: Months to show (default: ``sufficiency.months_to_analyze``)

        Returns:
            One point per month, or ``[]`` when there is not enough data yet

        Raises:
            ValueError: If months is below 1.
        """
        if months is None:
            months = self.settings.sufficiency.months_to_analyze
        elif months < 1:
            raise ValueError(f"months must be at least 1, got {months}")
        cache_key = ChartCache.build_key(category, ChartType.LINE, months)

        async def compute() -> List[LineChartPoint]:
            transformer = self.get_transformer(category, ChartType.LINE)
            days = months * DAYS_PER_MONTH
            records = await self._fetch(category, ChartType.LINE, days)
            self._require(category, ChartType.LINE, records, self.settings.sufficiency.min_data_points_for_line)

            time_period = TimePeriod(
                days=days,
                months=months,
                use_daily_aggregation=days <= DAILY_AGGREGATION_MAX_DAYS,
            )
            return transformer.transform_to_line_chart(
                records,
                self.settings.get_target_policy(category),
                time_period,
                reference_date=self._today(),
            )

        return await self._get_cached(cache_key, category, ChartType.LINE, compute)

    async def get_line_chart_data_with_strategy(
        self,
        category: str,
        strategy_name: Optional[str] = None,
        reference_date: Optional[DateLike] = None,
    ) -> List[LineChartPoint]:
        """
        Line chart partitioned by a time period strategy.

        Args:
            category: Pillar name
            strategy_name: Registered strategy (default: ``settings.default_strategy``)
            reference_date: Date the view is centered on (default: today)

        Raises:
            StrategyNotFoundError: If the strategy is not registered.
            TransformerNotFoundError: If the pillar has no transformer.
        """
        strategy_name = strategy_name or self.settings.default_strategy
        reference = to_date(reference_date) if reference_date is not None else self._today()
        params: List[Any] = [strategy_name]
        if reference_date is not None:
            params.append(format_date_string(reference))
        cache_key = ChartCache.build_key(category, "strategy", *params)

        async def compute() -> List[LineChartPoint]:
            strategy = self.strategies.require_strategy(strategy_name, category)
            transformer = self.get_transformer(category, ChartType.LINE)

            date_range = strategy.calculate_date_range(reference)
            lookback = max((self._today() - date_range.start_date).days, 0) + self.settings.fetch_buffer_days
            records = await self._fetch(category, ChartType.LINE, lookback)
            self._require(category, ChartType.LINE, records, self.settings.sufficiency.min_data_points_for_line)

            extractor = transformer.get_value_extractor()
            points = strategy.aggregate_to_chart_data(records, extractor, reference)
            target = resolve_target(self.settings.get_target_policy(category), records, extractor, reference)
            return apply_target(points, target)

        return await self._get_cached(cache_key, category, ChartType.LINE, compute)

    async def get_pie_chart_data(
        self,
        category: str,
        days: Optional[int] = None,
        breakdown: Union[PieBreakdown, str] = PieBreakdown.LEVELS,
    ) -> List[DonutSlice]:
        """
        Pie chart over the last ``days`` days.

        Args:
            category: Pillar name
            days: Window in days (default: ``settings.default_pie_days``)
            breakdown: ``levels`` (severity buckets) or ``descriptions``

        Raises:
            ConfigurationError: If the pillar does not support the breakdown.
            ValueError: If days is below 1.
        """
        if days is None:
            days = self.settings.default_pie_days
        elif days < 1:
            raise ValueError(f"days must be at least 1, got {days}")
        breakdown = PieBreakdown(breakdown)
        cache_key = ChartCache.build_key(category, ChartType.PIE, days, breakdown.value)

        async def compute() -> List[DonutSlice]:
            transformer = self.get_transformer(category, ChartType.PIE)
            if not transformer.supports_breakdown(breakdown):
                raise ConfigurationError(
                    f"Pillar {category} does not support the {breakdown.value} breakdown",
                    category,
                    ChartType.PIE,
                    details={"breakdown": breakdown.value},
                )

            records = await self._fetch(category, ChartType.PIE, days)
            self._require(category, ChartType.PIE, records, self.settings.sufficiency.min_data_points_for_pie)

            if breakdown == PieBreakdown.DESCRIPTIONS:
                return transformer.transform_to_description_pie(records)
            return transformer.transform_to_pie_chart(records)

        return await self._get_cached(cache_key, category, ChartType.PIE, compute)

    # Status

    async def has_sufficient_data(self, category: str, chart_type: Union[ChartType, str]) -> bool:
        """Whether the pillar has enough records for the chart type; False if the store fails"""
        chart_type = ChartType(chart_type)
        sufficiency = self.settings.sufficiency
        if chart_type == ChartType.LINE:
            days = sufficiency.months_to_analyze * DAYS_PER_MONTH
            required = sufficiency.min_data_points_for_line
        else:
            days = self.settings.default_pie_days
            required = sufficiency.min_data_points_for_pie

        try:
            records = await self._fetch(category, chart_type, days)
        except Exception as e:
            logger.error("Error checking data sufficiency for %s: %s", category, e)
            return False
        return len(records) >= required

    async def get_data_status(self, category: str) -> DataStatus:
        """Record count and date span for UI feedback; all zeros if the store fails"""
        sufficiency = self.settings.sufficiency
        try:
            records = await self._fetch(category, ChartType.LINE, sufficiency.months_to_analyze * DAYS_PER_MONTH)
        except Exception as e:
            logger.error("Error getting data status for %s: %s", category, e)
            return DataStatus(has_line_data=False, has_pie_data=False, data_points_count=0)

        oldest, newest = get_date_range(records)
        return DataStatus(
            has_line_data=len(records) >= sufficiency.min_data_points_for_line,
            has_pie_data=len(records) >= sufficiency.min_data_points_for_pie,
            data_points_count=len(records),
            oldest_data_date=oldest,
            newest_data_date=newest,
        )

    # Cache

    def invalidate_cache(self, category: str) -> None:
        """Remove all cached chart data of a pillar"""
        self.cache.invalidate(category)

    def clear_cache(self) -> None:
        """Clear all cached data"""
        self.cache.clear()

    # Internals

    def _today(self) -> date:
        return self._clock().date()

    @log_timing
    async def _fetch(self, category: str, chart_type: ChartType, lookback_days: int) -> List[ResponseRecord]:
        logger.debug("Fetching %s responses for last %d days", category, lookback_days)
        try:
            return await self.store.fetch_records(category, lookback_days)
        except Exception as e:
            raise DataSourceError(category, chart_type, e) from e

    @staticmethod
    def _require(category: str, chart_type: ChartType, records: List[ResponseRecord], required: int) -> None:
        if len(records) < required:
            raise InsufficientDataError(category, chart_type, len(records), required)

    async def _get_cached(
        self,
        cache_key: str,
        category: str,
        chart_type: ChartType,
        compute: Callable[[], Awaitable[list]],
    ) -> list:
        cached = self.cache.get(cache_key)
        if cached is not None:
            # Fresh list per caller, the cached tuple stays untouched
            return list(cached)

        try:
            data = await compute()
        except InsufficientDataError as e:
            # Expected until enough responses are collected
            logger.info(e.message)
            return []
        except ChartTransformationError:
            raise
        except Exception as e:
            raise ChartTransformationError(
                f"Failed to get {chart_type.value} chart data for {category}: {e}",
                category,
                chart_type,
                cause=e,
            ) from e

        self.cache.set(cache_key, tuple(data), category)
        return list(data)
