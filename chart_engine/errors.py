# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Error handling for the chart engine.

``InsufficientDataError`` is an expected condition ("not enough data yet") and
must be rendered as an empty/placeholder chart, never reported as a failure.
Everything else derives from ``ChartTransformationError``.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from chart_engine.models import ChartType


class ErrorCode(Enum):
    """Error codes for the different failure kinds"""
    TRANSFORMATION_ERROR = "CHART_001"
    INSUFFICIENT_DATA = "CHART_002"
    CONFIGURATION_ERROR = "CONFIG_001"
    STRATEGY_NOT_FOUND = "CONFIG_002"
    TRANSFORMER_NOT_FOUND = "CONFIG_003"
    DATA_SOURCE_ERROR = "DATA_001"


class ChartTransformationError(Exception):
    """Base exception for chart transformation failures"""

    def __init__(
        self,
        message: str,
        category: str,
        chart_type: Union[ChartType, str],
        cause: Optional[BaseException] = None,
        error_code: ErrorCode = ErrorCode.TRANSFORMATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.category = category
        self.chart_type = ChartType(chart_type)
        self.cause = cause
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "category": self.category,
            "chart_type": self.chart_type.value,
            "cause": repr(self.cause) if self.cause is not None else None,
            "details": self.details,
        }


class InsufficientDataError(ChartTransformationError):
    """Not enough records yet to draw a meaningful chart"""

    def __init__(self, category: str, chart_type: Union[ChartType, str], available: int, required: int):
        chart_type = ChartType(chart_type)
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient data for {chart_type.value} chart in {category} pillar. "
            f"Available: {available}, Required: {required}",
            category,
            chart_type,
            error_code=ErrorCode.INSUFFICIENT_DATA,
            details={"available": available, "required": required},
        )


class ConfigurationError(ChartTransformationError):
    """Engine wiring errors (missing strategy or transformer)"""

    def __init__(
        self,
        message: str,
        category: str,
        chart_type: Union[ChartType, str],
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, category, chart_type, error_code=error_code, details=details)


class StrategyNotFoundError(ConfigurationError):
    """Requested time period strategy is not registered"""

    def __init__(self, strategy_name: str, category: str = "", chart_type: Union[ChartType, str] = ChartType.LINE):
        self.strategy_name = strategy_name
        super().__init__(
            f"Strategy not found: {strategy_name}",
            category,
            chart_type,
            error_code=ErrorCode.STRATEGY_NOT_FOUND,
            details={"strategy": strategy_name},
        )


class TransformerNotFoundError(ConfigurationError):
    """No transformer registered for the pillar"""

    def __init__(self, category: str, chart_type: Union[ChartType, str] = ChartType.LINE):
        super().__init__(
            f"No transformer registered for pillar: {category}",
            category,
            chart_type,
            error_code=ErrorCode.TRANSFORMER_NOT_FOUND,
        )


class DataSourceError(ChartTransformationError):
    """The response store failed to deliver records"""

    def __init__(self, category: str, chart_type: Union[ChartType, str], cause: BaseException):
        super().__init__(
            f"Failed to fetch {category} responses: {cause}",
            category,
            chart_type,
            cause=cause,
            error_code=ErrorCode.DATA_SOURCE_ERROR,
        )
