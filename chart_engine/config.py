# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Configuration management for the chart engine.

Settings come from ``CHART_ENGINE_*`` environment variables (nested sections
use ``__``, e.g. ``CHART_ENGINE_CACHE__TTL_MINUTES=10``) or a ``.env`` file.
Per-pillar target policies can additionally be overridden from a YAML file.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class TargetPolicy(BaseModel):
    """Target line policy for one pillar"""
    line_chart_target: Optional[float] = Field(None, description="Static target value")
    adaptive_target: bool = Field(False, description="Derive the target from historical data")
    target_percentile: float = Field(0.8, gt=0, le=1, description="Percentile used for adaptive targets")
    target_calculation_days: Optional[int] = Field(
        None, ge=1, description="Days of history considered for adaptive targets"
    )


class DataSufficiencyConfig(BaseModel):
    """Minimum data needed before a chart is shown"""
    min_data_points_for_line: int = Field(10, ge=0)
    min_data_points_for_pie: int = Field(5, ge=0)
    months_to_analyze: int = Field(5, ge=1)


class CacheConfig(BaseModel):
    """Chart cache tuning"""
    ttl_minutes: float = Field(5, gt=0)
    max_entries: int = Field(100, ge=1)
    cleanup_interval_minutes: float = Field(15, gt=0)


DEFAULT_TARGETS: Dict[str, TargetPolicy] = {
    "safety": TargetPolicy(line_chart_target=0),          # zero incidents
    "quality": TargetPolicy(line_chart_target=95),        # 95% quality score
    "cost": TargetPolicy(adaptive_target=True, target_calculation_days=30),
    "delivery": TargetPolicy(line_chart_target=95),       # 95% on-time delivery
    "inventory": TargetPolicy(adaptive_target=True, target_calculation_days=30),
    "production": TargetPolicy(adaptive_target=True, target_calculation_days=30),
}


class ChartEngineSettings(BaseSettings):
    """Chart engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="CHART_ENGINE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    sufficiency: DataSufficiencyConfig = Field(default_factory=DataSufficiencyConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    targets: Dict[str, TargetPolicy] = Field(default_factory=lambda: dict(DEFAULT_TARGETS))
    targets_file: Optional[Path] = None

    default_pie_days: int = Field(30, ge=1)
    fetch_buffer_days: int = Field(5, ge=0)
    default_strategy: str = "month"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @model_validator(mode="after")
    def _merge_targets_file(self) -> "ChartEngineSettings":
        if self.targets_file is not None:
            self.targets = {**self.targets, **load_target_policies(self.targets_file)}
        return self

    def get_target_policy(self, category: str) -> Optional[TargetPolicy]:
        """Target policy for a pillar, or None when the pillar has none"""
        return self.targets.get(category)


def load_target_policies(path: Path) -> Dict[str, TargetPolicy]:
    """
    Load per-pillar target policies from a YAML file.

    The file maps pillar names to policy fields::

        cost:
          adaptive_target: true
          target_percentile: 0.9

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pydantic.ValidationError: If a policy is invalid.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Target policy file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    policies = {name: TargetPolicy.model_validate(values or {}) for name, values in raw.items()}
    logger.info("Loaded %d target policies from %s", len(policies), path)
    return policies


@lru_cache()
def get_settings() -> ChartEngineSettings:
    """Get cached settings instance."""
    return ChartEngineSettings()
