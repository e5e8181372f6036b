# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Aggregation Utilities

Reusable reducers that turn response records into chart data:
- Monthly / daily averaging for line charts
- Categorical counting with deterministic colors for pie charts
- Percentile based adaptive targets
- Date range and data quality helpers
"""

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from chart_engine.date_ranges import (
    DateLike,
    format_day_label,
    multi_month,
    to_date,
    today,
)
from chart_engine.models import (
    DataQuality,
    DataType,
    DonutSlice,
    LineChartPoint,
    ResponseRecord,
)

ValueExtractor = Callable[[ResponseRecord], Any]
CategoryExtractor = Callable[[ResponseRecord], Iterable[str]]

# Pie chart palette; colors are assigned by position
PIE_CHART_COLORS = [
    "#ef4444",  # red
    "#f97316",  # orange
    "#eab308",  # yellow
    "#22c55e",  # green
    "#06b6d4",  # cyan
    "#3b82f6",  # blue
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#84cc16",  # lime
    "#f59e0b",  # amber
]

DATA_COMPLETENESS_DAYS = 30


def numeric_or_none(value: Any) -> Optional[float]:
    """Return value as a float when it is a usable number, else None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number
    return None


def _numeric_values(records: Iterable[ResponseRecord], value_extractor: ValueExtractor) -> List[float]:
    values = []
    for record in records:
        number = numeric_or_none(value_extractor(record))
        if number is not None:
            values.append(number)
    return values


def _average_point(label: str, records: List[ResponseRecord], value_extractor: ValueExtractor) -> LineChartPoint:
    if not records:
        return LineChartPoint(period_label=label, value=0, target=0, data_type=DataType.MISSING)
    values = _numeric_values(records, value_extractor)
    average = sum(values) / len(values) if values else 0
    return LineChartPoint(period_label=label, value=round(average, 2), target=0, data_type=DataType.RECORDED)


def aggregate_to_monthly(
    records: Sequence[ResponseRecord],
    value_extractor: ValueExtractor,
    months: int = 5,
    reference_date: Optional[DateLike] = None,
) -> List[LineChartPoint]:
    """
    Average records per calendar month over the trailing ``months`` window.

    Args:
        records: Records to aggregate
        value_extractor: Maps a record to its numeric value
        months: Number of months ending with the reference month
        reference_date: Defaults to today

    Returns:
        One point per month, oldest first. Months without records are
        ``0`` and tagged missing. Empty input gives ``[]``.
    """
    if not records:
        return []

    by_month: Dict[Tuple[int, int], List[ResponseRecord]] = defaultdict(list)
    for record in records:
        by_month[(record.response_date.year, record.response_date.month)].append(record)

    return [
        _average_point(info.label, by_month.get((info.year, info.month), []), value_extractor)
        for info in multi_month(months, reference_date)
    ]


def aggregate_to_daily(
    records: Sequence[ResponseRecord],
    value_extractor: ValueExtractor,
    days: int,
    reference_date: Optional[DateLike] = None,
) -> List[LineChartPoint]:
    """Average records per day over the trailing ``days`` window ending at the reference date."""
    if not records:
        return []

    end = to_date(reference_date) if reference_date is not None else today()
    by_day: Dict[date, List[ResponseRecord]] = defaultdict(list)
    for record in records:
        by_day[record.response_date].append(record)

    points = []
    for offset in range(days - 1, -1, -1):
        day = end - timedelta(days=offset)
        points.append(_average_point(format_day_label(day), by_day.get(day, []), value_extractor))
    return points


def aggregate_categorical(
    records: Sequence[ResponseRecord],
    category_extractor: CategoryExtractor,
) -> List[DonutSlice]:
    """
    Count category labels across records for a pie chart.

    Labels that are empty or whitespace are dropped. Slices are sorted by
    descending count; ties keep the order in which labels first appeared.
    Colors follow that order, so the most frequent label always gets the
    first palette color.
    """
    if not records:
        return []

    counts: Dict[str, int] = {}
    for record in records:
        for label in category_extractor(record) or []:
            if label and label.strip():
                counts[label] = counts.get(label, 0) + 1

    # sorted() is stable, dict order is first occurrence
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    colors = generate_color_scheme([label for label, _ in ordered])

    return [DonutSlice(name=label, value=count, color=colors[label]) for label, count in ordered]


def calculate_adaptive_target(
    records: Sequence[ResponseRecord],
    value_extractor: ValueExtractor,
    percentile: float = 0.8,
) -> float:
    """
    Percentile target from historical values.

    Values are sorted ascending and the one at ``floor(n * percentile)`` is
    taken, clamped to the last index. Returns 0 when there are no numeric
    values.
    """
    values = sorted(_numeric_values(records, value_extractor))
    if not values:
        return 0

    index = math.floor(len(values) * percentile)
    target = values[index] if index < len(values) else values[-1]
    return round(target, 2)


def generate_color_scheme(labels: Sequence[str]) -> Dict[str, str]:
    """Assign palette colors by position in ``labels``"""
    return {label: PIE_CHART_COLORS[index % len(PIE_CHART_COLORS)] for index, label in enumerate(labels)}


# Date helpers

def filter_recent_records(
    records: Iterable[ResponseRecord],
    days: int,
    reference_date: Optional[DateLike] = None,
) -> List[ResponseRecord]:
    """Records dated within the last ``days`` days of the reference date"""
    end = to_date(reference_date) if reference_date is not None else today()
    cutoff = end - timedelta(days=days)
    return [record for record in records if record.response_date >= cutoff]


def get_date_range(records: Iterable[ResponseRecord]) -> Tuple[Optional[date], Optional[date]]:
    """Oldest and newest response date, or (None, None)"""
    dates = [record.response_date for record in records]
    if not dates:
        return None, None
    return min(dates), max(dates)


# Validation helpers

def has_valid_numeric_data(records: Iterable[ResponseRecord], key: str) -> bool:
    """Whether any record holds a real number under ``key``"""
    return any(numeric_or_none(record.answers.get(key)) is not None for record in records)


def has_valid_categorical_data(records: Iterable[ResponseRecord], key: str) -> bool:
    """Whether any record holds a non-blank string or a non-empty list under ``key``"""
    for record in records:
        value = record.answers.get(key)
        if isinstance(value, str) and value.strip():
            return True
        if isinstance(value, list) and value:
            return True
    return False


def get_data_quality(
    records: Sequence[ResponseRecord],
    reference_date: Optional[DateLike] = None,
) -> DataQuality:
    """Summarize how much data a pillar has and how complete the last 30 days are"""
    oldest, newest = get_date_range(records)
    recent = filter_recent_records(records, DATA_COMPLETENESS_DAYS, reference_date)
    unique_days = {record.response_date for record in recent}
    completeness = len(unique_days) / DATA_COMPLETENESS_DAYS * 100

    return DataQuality(
        total_responses=len(records),
        oldest=oldest,
        newest=newest,
        has_recent_data=bool(recent),
        data_completeness=round(completeness, 2),
    )


__all__ = [
    "PIE_CHART_COLORS",
    "ValueExtractor",
    "CategoryExtractor",
    "numeric_or_none",
    "aggregate_to_monthly",
    "aggregate_to_daily",
    "aggregate_categorical",
    "calculate_adaptive_target",
    "generate_color_scheme",
    "filter_recent_records",
    "get_date_range",
    "has_valid_numeric_data",
    "has_valid_categorical_data",
    "get_data_quality",
]
