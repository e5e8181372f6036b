"""
Tests for mock response generation.
"""

from chart_engine.migrations import INCIDENT_COUNT_FIELD
from chart_engine.mock_data import MockResponseGenerator
from chart_engine.transformers import SafetyTransformer
from tests.factories import REFERENCE_DATE


class TestMockResponseGenerator:
    """Test generated pillar responses"""

    def test_same_seed_same_history(self):
        first = MockResponseGenerator(seed=7).generate_safety_history(days=60, end_date=REFERENCE_DATE)
        second = MockResponseGenerator(seed=7).generate_safety_history(days=60, end_date=REFERENCE_DATE)

        assert [r.answers for r in first] == [r.answers for r in second]

    def test_history_is_weekdays_oldest_first(self):
        history = MockResponseGenerator().generate_safety_history(
            days=30, end_date=REFERENCE_DATE, skip_probability=0
        )

        dates = [r.response_date for r in history]
        assert dates == sorted(dates)
        assert all(d.weekday() < 5 for d in dates)
        assert dates[-1] == REFERENCE_DATE

    def test_descriptions_match_incident_count(self):
        generator = MockResponseGenerator()

        record = generator.generate_safety_response(REFERENCE_DATE, "2 or more")

        assert record.answers[INCIDENT_COUNT_FIELD] == "2 or more"
        assert len(SafetyTransformer().incident_descriptions(record)) == 2

    def test_legacy_field(self):
        record = MockResponseGenerator().generate_safety_response(
            REFERENCE_DATE, "1", legacy_field="safety-incident-count"
        )

        assert record.schema_version == 1
        assert INCIDENT_COUNT_FIELD not in record.answers
        assert SafetyTransformer().incident_count(record) == 1

    def test_numeric_history(self):
        history = MockResponseGenerator().generate_numeric_history(
            "quality", "score", days=10, end_date=REFERENCE_DATE
        )

        assert len(history) == 10
        assert all(r.category_key == "quality" for r in history)
        assert all(80 <= r.answers["score"] <= 100 for r in history)
