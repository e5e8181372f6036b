# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Data models for pillar chart generation.

These models give the chart engine a consistent structure that serializes to
the camelCase JSON shape consumed by the dashboard charts
(``model_dump(by_alias=True)``), while Python code uses snake_case attributes.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


AnswerValue = Union[str, int, float, bool, List[Union[str, int, float, bool]], None]


class ChartType(str, Enum):
    """Chart families produced by the engine"""
    LINE = "line"
    PIE = "pie"


class DataType(str, Enum):
    """Whether a line chart point is backed by recorded responses"""
    RECORDED = "recorded"
    MISSING = "missing"


class PieBreakdown(str, Enum):
    """Available pie chart breakdowns"""
    LEVELS = "levels"              # severity buckets
    DESCRIPTIONS = "descriptions"  # free-text incident descriptions


class ChartModel(BaseModel):
    """Immutable base for models that travel to the chart rendering layer"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ResponseRecord(ChartModel):
    """One dated set of answers for a pillar, as read from the response store"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., description="Record identifier")
    category_key: str = Field(..., alias="pillar", description="Pillar the answers belong to")
    response_date: date = Field(..., description="Calendar date of the response")
    answers: Dict[str, AnswerValue] = Field(
        default_factory=dict,
        alias="responses",
        description="Question ID -> answer value",
    )
    user_id: Optional[str] = Field(None, description="Submitting user")
    schema_version: int = Field(1, description="Answer schema version, see chart_engine.migrations")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("response_date", mode="before")
    @classmethod
    def _drop_time_component(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class LineChartPoint(ChartModel):
    """A single point of a line chart; one per partition of the date range"""
    period_label: str = Field(..., description="Partition label (MM/DD, Week N, Jan)")
    value: float = Field(..., description="Aggregated value for the partition")
    target: float = Field(0, description="Target line value")
    data_type: DataType = Field(DataType.RECORDED, description="Recorded or missing partition")


class DonutSlice(ChartModel):
    """A single slice of a donut/pie chart"""
    name: str = Field(..., description="Category label")
    value: float = Field(..., description="Occurrence count")
    color: str = Field(..., description="Hex color code")


class StrategyPeriod(ChartModel):
    """One partition of a strategy date range"""
    label: str
    start_date: date
    end_date: date
    is_future: bool = False
    dates: List[date] = Field(default_factory=list, description="Member days of the partition")


class StrategyDateRange(ChartModel):
    """Overall window of a time period strategy and its partitions"""
    start_date: date
    end_date: date
    description: str
    periods: List[StrategyPeriod] = Field(default_factory=list)


class StrategyDisplayInfo(ChartModel):
    """Human readable name of a time period strategy"""
    label: str
    description: str


class StrategyOption(ChartModel):
    """Selector option derived from a registered strategy"""
    value: str
    label: str
    description: str


class TimePeriod(ChartModel):
    """Window hint passed to transformers on the legacy monthly line path"""
    days: int = Field(..., ge=1)
    months: int = Field(..., ge=1)
    use_daily_aggregation: bool = False


class DataStatus(ChartModel):
    """Data sufficiency status of a pillar, for UI feedback"""
    has_line_data: bool
    has_pie_data: bool
    data_points_count: int
    oldest_data_date: Optional[date] = None
    newest_data_date: Optional[date] = None


class DataQuality(ChartModel):
    """Data quality summary for a set of responses"""
    total_responses: int
    oldest: Optional[date] = None
    newest: Optional[date] = None
    has_recent_data: bool = False
    data_completeness: float = Field(0, description="Percent of the last 30 days with data")


class SafetyWorstDay(ChartModel):
    """Day with the most safety incidents"""
    response_date: date
    incidents: float


class SafetyMetrics(ChartModel):
    """Additional safety dashboard figures"""
    total_incidents: float = 0
    incident_free_days: int = 0
    average_incidents_per_month: float = 0
    worst_day: Optional[SafetyWorstDay] = None


class IncidentOption(ChartModel):
    """A previously used incident description"""
    value: str = Field(..., description="Full incident description")
    display_text: str = Field(..., description="Description truncated for display")
    last_used: date
