# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Target line resolution for line charts."""

import logging
from typing import List, Optional, Sequence

from chart_engine.aggregation import ValueExtractor, calculate_adaptive_target, filter_recent_records
from chart_engine.config import TargetPolicy
from chart_engine.date_ranges import DateLike
from chart_engine.models import LineChartPoint, ResponseRecord

logger = logging.getLogger(__name__)


def resolve_target(
    policy: Optional[TargetPolicy],
    records: Sequence[ResponseRecord],
    value_extractor: ValueExtractor,
    reference_date: Optional[DateLike] = None,
) -> float:
    """
    Target value for a pillar's line chart.

    A static ``line_chart_target`` wins. Otherwise an adaptive policy takes the
    configured percentile of the same records, optionally limited to the last
    ``target_calculation_days``. Without a policy the target is 0.
    """
    if policy is None:
        return 0
    if policy.line_chart_target is not None:
        return policy.line_chart_target
    if policy.adaptive_target:
        history = records
        if policy.target_calculation_days:
            history = filter_recent_records(records, policy.target_calculation_days, reference_date)
        target = calculate_adaptive_target(history, value_extractor, policy.target_percentile)
        logger.debug(
            "Adaptive target %.2f from %d records (percentile %.2f)",
            target, len(history), policy.target_percentile,
        )
        return target
    return 0


def apply_target(points: List[LineChartPoint], target: float) -> List[LineChartPoint]:
    """Copies of ``points`` carrying ``target``"""
    return [point.model_copy(update={"target": target}) for point in points]
