# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Base Response Store

Defines the interface the chart engine uses to read stored responses.
"""

from abc import ABC, abstractmethod
from typing import List

from chart_engine.models import ResponseRecord


class BaseResponseStore(ABC):
    """
    Abstract base class for response stores.

    Stores are responsible for fetching persisted responses and returning
    them as ``ResponseRecord`` objects. They never cache; caching is the
    service's job.
    """

    @abstractmethod
    async def fetch_records(self, category_key: str, lookback_days: int) -> List[ResponseRecord]:
        """
        Fetch the responses of a pillar.

        Args:
            category_key: Pillar name
            lookback_days: Only responses with ``response_date >= today - lookback_days``

        Returns:
            Records ordered by ascending response date
        """
        pass
