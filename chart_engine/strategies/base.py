# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Base class for time period strategies.

A strategy turns a reference date into a partitioned date range and folds
records into one line chart point per partition. Partition values are sums,
since the charted quantities are additive counts.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence

from chart_engine.aggregation import ValueExtractor, numeric_or_none
from chart_engine.date_ranges import DateLike, in_range, to_date, today
from chart_engine.models import (
    DataType,
    LineChartPoint,
    ResponseRecord,
    StrategyDateRange,
    StrategyDisplayInfo,
    StrategyPeriod,
)

logger = logging.getLogger(__name__)


STRATEGY_DISPLAY_MAP: Dict[str, StrategyDisplayInfo] = {
    "week": StrategyDisplayInfo(label="1 Week", description="Work week around today (daily view)"),
    "month": StrategyDisplayInfo(label="1 Month", description="Current month broken into weeks"),
    "3month": StrategyDisplayInfo(label="3 Months", description="Last 3 months with monthly totals"),
    "6month": StrategyDisplayInfo(label="6 Months", description="Last 6 months with monthly totals"),
}


class BaseTimePeriodStrategy(ABC):
    """
    Abstract base for time period strategies.

    Subclasses provide the name and the date range; the fold over partitions
    is shared. A partition without records, or one starting after the
    reference date, is ``0`` and tagged missing.
    """

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Registry name, e.g. ``week``"""
        pass

    def get_display_info(self) -> StrategyDisplayInfo:
        """Label and description for selectors"""
        return STRATEGY_DISPLAY_MAP.get(
            self.get_strategy_name(),
            StrategyDisplayInfo(label=self.get_strategy_name(), description=""),
        )

    @abstractmethod
    def calculate_date_range(self, reference_date: Optional[DateLike] = None) -> StrategyDateRange:
        """Overall window and its partitions for the reference date (default today)"""
        pass

    def can_handle(self, records: Sequence[ResponseRecord]) -> bool:
        """Basic validation that there is anything to chart"""
        return bool(records)

    def aggregate_to_chart_data(
        self,
        records: Sequence[ResponseRecord],
        value_extractor: ValueExtractor,
        reference_date: Optional[DateLike] = None,
    ) -> List[LineChartPoint]:
        """
        Fold records into one point per partition.

        Args:
            records: Records of one pillar
            value_extractor: Maps a record to the number summed per partition
            reference_date: Defaults to today

        Returns:
            Points in partition order, targets left at 0. Empty input gives ``[]``.
        """
        if not self.can_handle(records):
            return []

        reference = to_date(reference_date) if reference_date is not None else today()
        date_range = self.calculate_date_range(reference)
        in_window = self.filter_by_date_range(records, date_range)
        by_date = self.group_by_date(in_window)

        points = []
        for period in date_range.periods:
            if period.is_future:
                points.append(self.create_point(period.label, 0, DataType.MISSING))
                continue
            period_records = [
                record
                for day, day_records in by_date.items()
                if in_range(day, period.start_date, period.end_date)
                for record in day_records
            ]
            if not period_records:
                points.append(self.create_point(period.label, 0, DataType.MISSING))
            else:
                points.append(self.create_point(
                    period.label,
                    self.sum_values(period_records, value_extractor),
                    DataType.RECORDED,
                ))

        logger.debug(
            "%s strategy folded %d of %d records into %d points",
            self.get_strategy_name(), len(in_window), len(records), len(points),
        )
        return points

    # Shared helpers

    @staticmethod
    def filter_by_date_range(
        records: Sequence[ResponseRecord],
        date_range: StrategyDateRange,
    ) -> List[ResponseRecord]:
        """Records inside the strategy's overall window"""
        return [
            record for record in records
            if in_range(record.response_date, date_range.start_date, date_range.end_date)
        ]

    @staticmethod
    def group_by_date(records: Sequence[ResponseRecord]) -> Dict[date, List[ResponseRecord]]:
        """Records grouped by response date"""
        groups: Dict[date, List[ResponseRecord]] = defaultdict(list)
        for record in records:
            groups[record.response_date].append(record)
        return dict(groups)

    @staticmethod
    def sum_values(records: Sequence[ResponseRecord], value_extractor: ValueExtractor) -> float:
        """Sum of extracted values; None and NaN are ignored"""
        total = 0.0
        for record in records:
            number = numeric_or_none(value_extractor(record))
            if number is not None:
                total += number
        return total

    @staticmethod
    def create_point(label: str, value: float, data_type: DataType = DataType.RECORDED) -> LineChartPoint:
        return LineChartPoint(period_label=label, value=value, target=0, data_type=data_type)

    @staticmethod
    def make_period(label: str, start: date, end: date, dates: List[date], reference: date) -> StrategyPeriod:
        return StrategyPeriod(
            label=label,
            start_date=start,
            end_date=end,
            is_future=start > reference,
            dates=dates,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.get_strategy_name()!r}>"
