# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Base class for pillar transformers.

A transformer knows how to read one pillar's answers: it supplies the numeric
value used by line charts and the category labels used by pie charts.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from chart_engine.aggregation import (
    CategoryExtractor,
    ValueExtractor,
    aggregate_categorical,
    aggregate_to_daily,
    aggregate_to_monthly,
)
from chart_engine.config import TargetPolicy
from chart_engine.date_ranges import DateLike
from chart_engine.models import DonutSlice, LineChartPoint, PieBreakdown, ResponseRecord, TimePeriod
from chart_engine.targets import apply_target, resolve_target


class BasePillarTransformer(ABC):
    """Abstract base for per-pillar extraction rules"""

    @property
    @abstractmethod
    def category(self) -> str:
        """Pillar handled by this transformer"""
        pass

    @abstractmethod
    def get_value_extractor(self) -> ValueExtractor:
        """Record -> number for line charts"""
        pass

    def get_category_extractor(self) -> CategoryExtractor:
        """Record -> labels for the generic categorical pie chart"""
        return lambda record: []

    def can_transform(self, records: Sequence[ResponseRecord]) -> bool:
        return any(record.category_key == self.category for record in records)

    def transform_to_line_chart(
        self,
        records: Sequence[ResponseRecord],
        target_config: Optional[TargetPolicy] = None,
        time_period: Optional[TimePeriod] = None,
        reference_date: Optional[DateLike] = None,
    ) -> List[LineChartPoint]:
        """
        Averaged line chart with the pillar's target applied.

        Monthly averages by default; daily averages when the time period asks
        for daily aggregation.
        """
        if not self.can_transform(records):
            return []

        extractor = self.get_value_extractor()
        if time_period is not None and time_period.use_daily_aggregation:
            points = aggregate_to_daily(records, extractor, time_period.days, reference_date)
        else:
            months = time_period.months if time_period is not None else 5
            points = aggregate_to_monthly(records, extractor, months, reference_date)

        target = resolve_target(target_config, records, extractor, reference_date)
        return apply_target(points, target)

    def transform_to_pie_chart(self, records: Sequence[ResponseRecord]) -> List[DonutSlice]:
        if not self.can_transform(records):
            return []
        return aggregate_categorical(records, self.get_category_extractor())

    def supports_breakdown(self, breakdown: PieBreakdown) -> bool:
        """Pie breakdowns this pillar can produce"""
        return breakdown == PieBreakdown.LEVELS

    def transform_to_description_pie(self, records: Sequence[ResponseRecord]) -> List[DonutSlice]:
        """Pie of free-text descriptions, for pillars that collect them"""
        raise NotImplementedError(f"{self.category} pillar has no description breakdown")
