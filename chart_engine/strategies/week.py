# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Week strategy: the work week around the reference date, one point per day."""

from typing import Optional

from chart_engine.date_ranges import DateLike, format_day_label, to_date, today, work_week
from chart_engine.models import StrategyDateRange
from chart_engine.strategies.base import BaseTimePeriodStrategy


class WeekStrategy(BaseTimePeriodStrategy):
    """Daily totals for Monday to Friday"""

    def get_strategy_name(self) -> str:
        return "week"

    def calculate_date_range(self, reference_date: Optional[DateLike] = None) -> StrategyDateRange:
        reference = to_date(reference_date) if reference_date is not None else today()
        days = work_week(reference)
        periods = [
            self.make_period(format_day_label(day), day, day, [day], reference)
            for day in days
        ]
        return StrategyDateRange(
            start_date=days[0],
            end_date=days[-1],
            description=f"Work week around today ({len(days)} days)",
            periods=periods,
        )
