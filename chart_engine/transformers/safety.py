# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Safety Pillar Transformer

Turns daily safety answers into chart data:
- Line charts of incident counts
- Severity pie (no / single / multiple incidents)
- Incident description pie
- Dashboard metrics and previously used incident descriptions
"""

import logging
import re
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from chart_engine.aggregation import (
    CategoryExtractor,
    ValueExtractor,
    filter_recent_records,
    generate_color_scheme,
)
from chart_engine.date_ranges import DateLike
from chart_engine.migrations import INCIDENT_COUNT_FIELD, LEGACY_INCIDENT_COUNT_FIELDS
from chart_engine.models import (
    DonutSlice,
    IncidentOption,
    PieBreakdown,
    ResponseRecord,
    SafetyMetrics,
    SafetyWorstDay,
)
from chart_engine.transformers.base import BasePillarTransformer

logger = logging.getLogger(__name__)

# Canonical field first, then spellings still found in old records
INCIDENT_COUNT_FIELDS = (INCIDENT_COUNT_FIELD,) + LEGACY_INCIDENT_COUNT_FIELDS

INCIDENT_FIELD_PATTERN = re.compile(r"^(\w+)-incident-(\d+)-description$")
MAX_INCIDENT_CHARS = 30

NO_INCIDENTS = "No Incidents"
SINGLE_INCIDENT = "Single Incident"
MULTIPLE_INCIDENTS = "Multiple Incidents"

SEVERITY_ORDER = [NO_INCIDENTS, SINGLE_INCIDENT, MULTIPLE_INCIDENTS]
SEVERITY_COLORS = {
    NO_INCIDENTS: "#22c55e",        # green
    SINGLE_INCIDENT: "#eab308",     # yellow
    MULTIPLE_INCIDENTS: "#ef4444",  # red
}
FALLBACK_COLOR = "#6b7280"

_OR_MORE = re.compile(r"^(\d+)\s*or\s+more$")
_LEADING_INT = re.compile(r"^[+-]?\d+")

_MISSING = object()


def coerce_incident_count(value: Any) -> float:
    """
    Numeric incident count from a stored answer.

    Numbers pass through (booleans count as 0), ``"<N> or more"`` maps to N,
    other strings use their leading integer, anything else is 0. Counts are
    never negative.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, value)
    if isinstance(value, str):
        cleaned = value.strip().lower()
        match = _OR_MORE.match(cleaned)
        if match:
            return int(match.group(1))
        match = _LEADING_INT.match(cleaned)
        if match:
            return max(0, int(match.group(0)))
    return 0


def severity_level(count: float) -> str:
    if count <= 0:
        return NO_INCIDENTS
    if count == 1:
        return SINGLE_INCIDENT
    return MULTIPLE_INCIDENTS


class SafetyTransformer(BasePillarTransformer):
    """Transformer for the safety pillar"""

    @property
    def category(self) -> str:
        return "safety"

    # Field access

    @staticmethod
    def find_incident_count(answers: Dict[str, Any]) -> Any:
        """Value of the first incident count spelling present, or a sentinel when none is"""
        for field in INCIDENT_COUNT_FIELDS:
            if field in answers:
                return answers[field]
        return _MISSING

    def incident_count(self, record: ResponseRecord) -> float:
        value = self.find_incident_count(record.answers)
        if value is _MISSING:
            return 0
        return coerce_incident_count(value)

    def _has_incident_count(self, record: ResponseRecord) -> bool:
        value = self.find_incident_count(record.answers)
        return value is not _MISSING and value is not None and value != ""

    def incident_descriptions(self, record: ResponseRecord) -> List[str]:
        """Trimmed descriptions of this pillar, in ascending incident number"""
        numbered = []
        for key, value in record.answers.items():
            match = INCIDENT_FIELD_PATTERN.match(key)
            if not match or match.group(1) != self.category:
                continue
            if isinstance(value, str) and value.strip():
                numbered.append((int(match.group(2)), value.strip()))
        return [description for _, description in sorted(numbered, key=lambda item: item[0])]

    # Transformer contract

    def can_transform(self, records: Sequence[ResponseRecord]) -> bool:
        return any(
            record.category_key == self.category and self._has_incident_count(record)
            for record in records
        )

    def get_value_extractor(self) -> ValueExtractor:
        return self.incident_count

    def get_category_extractor(self) -> CategoryExtractor:
        def extract(record: ResponseRecord) -> List[str]:
            if not self._has_incident_count(record):
                return []
            return [severity_level(self.incident_count(record))]
        return extract

    def transform_to_pie_chart(self, records: Sequence[ResponseRecord]) -> List[DonutSlice]:
        """Incident severity distribution, ordered from no incidents to multiple"""
        if not self.can_transform(records):
            return []

        extract = self.get_category_extractor()
        counts = Counter(label for record in records for label in extract(record))
        ordered = sorted(
            counts,
            key=lambda level: SEVERITY_ORDER.index(level) if level in SEVERITY_ORDER else len(SEVERITY_ORDER),
        )
        return [
            DonutSlice(name=level, value=counts[level], color=SEVERITY_COLORS.get(level, FALLBACK_COLOR))
            for level in ordered
        ]

    def supports_breakdown(self, breakdown: PieBreakdown) -> bool:
        return breakdown in (PieBreakdown.LEVELS, PieBreakdown.DESCRIPTIONS)

    def transform_to_description_pie(self, records: Sequence[ResponseRecord]) -> List[DonutSlice]:
        return self.transform_to_incident_description_pie(records)

    def transform_to_incident_description_pie(
        self,
        records: Sequence[ResponseRecord],
        days: Optional[int] = None,
        reference_date: Optional[DateLike] = None,
    ) -> List[DonutSlice]:
        """
        Distribution of incident descriptions.

        Colors are assigned in first-occurrence order so a description keeps
        its color while the set of descriptions is unchanged; slices are then
        ordered by descending count.

        Args:
            records: Safety records
            days: Only count records from the last ``days`` days
            reference_date: End of the ``days`` window, defaults to today
        """
        if days is not None:
            records = filter_recent_records(records, days, reference_date)

        counts: Dict[str, int] = {}
        for record in records:
            for description in self.incident_descriptions(record):
                counts[description] = counts.get(description, 0) + 1

        colors = generate_color_scheme(list(counts))
        ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [
            DonutSlice(name=description, value=count, color=colors[description])
            for description, count in ordered
        ]

    # Dashboard extras

    def get_additional_metrics(self, records: Sequence[ResponseRecord]) -> SafetyMetrics:
        """Totals, incident-free days, monthly average and the worst day"""
        if not self.can_transform(records):
            return SafetyMetrics()

        safety_records = [record for record in records if record.category_key == self.category]
        total = 0.0
        incident_free_days = 0
        worst: Optional[SafetyWorstDay] = None
        months = set()

        for record in safety_records:
            incidents = self.incident_count(record)
            total += incidents
            if incidents == 0:
                incident_free_days += 1
            if worst is None or incidents > worst.incidents:
                worst = SafetyWorstDay(response_date=record.response_date, incidents=incidents)
            months.add((record.response_date.year, record.response_date.month))

        average = round(total / len(months), 2) if months else 0
        return SafetyMetrics(
            total_incidents=total,
            incident_free_days=incident_free_days,
            average_incidents_per_month=average,
            worst_day=worst if worst is not None and worst.incidents > 0 else None,
        )

    def get_incident_history(self, records: Sequence[ResponseRecord]) -> List[IncidentOption]:
        """Distinct incident descriptions, most recently used first"""
        last_used: Dict[str, date] = {}
        for record in records:
            for key, value in record.answers.items():
                match = INCIDENT_FIELD_PATTERN.match(key)
                if not match or match.group(1) != self.category:
                    continue
                if not isinstance(value, str) or not value.strip():
                    continue
                description = value.strip()
                if description not in last_used or record.response_date > last_used[description]:
                    last_used[description] = record.response_date

        options = [
            IncidentOption(
                value=description,
                display_text=description[:MAX_INCIDENT_CHARS],
                last_used=used,
            )
            for description, used in last_used.items()
        ]
        options.sort(key=lambda option: option.last_used, reverse=True)
        return options


__all__ = [
    "SafetyTransformer",
    "coerce_incident_count",
    "severity_level",
    "INCIDENT_COUNT_FIELDS",
    "INCIDENT_FIELD_PATTERN",
    "MAX_INCIDENT_CHARS",
    "SEVERITY_COLORS",
]
