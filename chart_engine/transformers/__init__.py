# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Per-pillar transformers."""

from chart_engine.transformers.base import BasePillarTransformer
from chart_engine.transformers.safety import SafetyTransformer


def default_transformers():
    """Transformers registered on a new service"""
    return [SafetyTransformer()]


__all__ = ["BasePillarTransformer", "SafetyTransformer", "default_transformers"]
