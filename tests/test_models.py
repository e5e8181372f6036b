"""
Tests for chart engine data models.
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from chart_engine.models import DataType, DonutSlice, LineChartPoint, ResponseRecord


class TestResponseRecord:
    """Test parsing stored responses"""

    def test_parse_from_store_payload(self):
        record = ResponseRecord.model_validate({
            "id": 42,
            "pillar": "safety",
            "responseDate": "2024-05-15T08:30:00Z",
            "responses": {"safety-incidents-count": "1"},
            "schemaVersion": 2,
        })

        assert record.id == "42"
        assert record.category_key == "safety"
        assert record.response_date == date(2024, 5, 15)
        assert record.answers == {"safety-incidents-count": "1"}

    def test_datetime_date(self):
        record = ResponseRecord(id="r1", category_key="safety", response_date=datetime(2024, 5, 15, 23, 59))

        assert record.response_date == date(2024, 5, 15)

    def test_frozen(self):
        record = ResponseRecord(id="r1", category_key="safety", response_date=date(2024, 5, 15))

        with pytest.raises(ValidationError):
            record.category_key = "quality"


class TestChartModels:
    """Test chart output serialization"""

    def test_line_point_camel_case(self):
        point = LineChartPoint(period_label="Week 1", value=3, data_type=DataType.MISSING)

        assert point.model_dump(by_alias=True, mode="json") == {
            "periodLabel": "Week 1",
            "value": 3.0,
            "target": 0.0,
            "dataType": "missing",
        }

    def test_slice(self):
        slice_ = DonutSlice(name="No Incidents", value=4, color="#22c55e")

        assert slice_.model_dump(by_alias=True) == {"name": "No Incidents", "value": 4, "color": "#22c55e"}
