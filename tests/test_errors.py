"""
Tests for chart engine errors.
"""

from chart_engine.errors import (
    ChartTransformationError,
    ConfigurationError,
    DataSourceError,
    ErrorCode,
    InsufficientDataError,
    StrategyNotFoundError,
    TransformerNotFoundError,
)
from chart_engine.models import ChartType


class TestErrorHierarchy:
    """Test error classes and their payloads"""

    def test_insufficient_data(self):
        error = InsufficientDataError("safety", "line", 3, 10)

        assert isinstance(error, ChartTransformationError)
        assert error.available == 3
        assert error.required == 10
        assert error.chart_type == ChartType.LINE
        assert "Available: 3, Required: 10" in str(error)
        assert error.error_code == ErrorCode.INSUFFICIENT_DATA

    def test_configuration_errors(self):
        strategy_error = StrategyNotFoundError("fortnight", "safety")
        transformer_error = TransformerNotFoundError("delivery", ChartType.PIE)

        assert isinstance(strategy_error, ConfigurationError)
        assert isinstance(transformer_error, ConfigurationError)
        assert strategy_error.details == {"strategy": "fortnight"}
        assert transformer_error.chart_type == ChartType.PIE
        assert transformer_error.error_code == ErrorCode.TRANSFORMER_NOT_FOUND

    def test_cause_is_chained(self):
        cause = ConnectionError("refused")
        error = DataSourceError("safety", ChartType.LINE, cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert "refused" in error.message

    def test_to_dict(self):
        error = ChartTransformationError("failed", "quality", "pie", cause=ValueError("bad"))

        assert error.to_dict() == {
            "error_code": "CHART_001",
            "message": "failed",
            "category": "quality",
            "chart_type": "pie",
            "cause": "ValueError('bad')",
            "details": {},
        }
