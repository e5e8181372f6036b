# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Multi-month strategies: monthly totals for the last N calendar months."""

from datetime import timedelta
from typing import Optional

from chart_engine.date_ranges import DateLike, multi_month, to_date, today
from chart_engine.models import StrategyDateRange
from chart_engine.strategies.base import BaseTimePeriodStrategy


class MultiMonthStrategy(BaseTimePeriodStrategy):
    """Monthly totals for ``month_count`` months ending with the reference month"""

    month_count: int = 3

    def get_strategy_name(self) -> str:
        return f"{self.month_count}month"

    def calculate_date_range(self, reference_date: Optional[DateLike] = None) -> StrategyDateRange:
        reference = to_date(reference_date) if reference_date is not None else today()
        months = multi_month(self.month_count, reference)
        periods = []
        for info in months:
            span = (info.end_date - info.start_date).days + 1
            days = [info.start_date + timedelta(days=offset) for offset in range(span)]
            periods.append(self.make_period(info.label, info.start_date, info.end_date, days, reference))
        return StrategyDateRange(
            start_date=months[0].start_date,
            end_date=months[-1].end_date,
            description=f"Last {self.month_count} months",
            periods=periods,
        )


class ThreeMonthStrategy(MultiMonthStrategy):
    month_count = 3


class SixMonthStrategy(MultiMonthStrategy):
    month_count = 6
