# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Month strategy: the reference month split into Monday-Sunday weeks."""

from typing import Optional

from chart_engine.date_ranges import DateLike, month_as_weeks, to_date, today
from chart_engine.models import StrategyDateRange
from chart_engine.strategies.base import BaseTimePeriodStrategy


class MonthStrategy(BaseTimePeriodStrategy):
    """
    Weekly totals for the current month.

    A week's value covers its full Monday-Sunday span, including days that
    spill into the neighbouring months.
    """

    def get_strategy_name(self) -> str:
        return "month"

    def calculate_date_range(self, reference_date: Optional[DateLike] = None) -> StrategyDateRange:
        reference = to_date(reference_date) if reference_date is not None else today()
        weeks = month_as_weeks(reference)
        periods = [
            self.make_period(week.label, week.start_date, week.end_date, week.dates, reference)
            for week in weeks
        ]
        return StrategyDateRange(
            start_date=weeks[0].start_date,
            end_date=weeks[-1].end_date,
            description=f"Current month ({len(weeks)} weeks)",
            periods=periods,
        )
