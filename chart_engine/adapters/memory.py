# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""In-memory response store for demos and tests."""

from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional

from chart_engine.adapters.base import BaseResponseStore
from chart_engine.date_ranges import today as default_today
from chart_engine.models import ResponseRecord


class InMemoryResponseStore(BaseResponseStore):
    """Holds records in a list; counts fetches so callers can observe caching"""

    def __init__(
        self,
        records: Optional[Iterable[ResponseRecord]] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._records: List[ResponseRecord] = list(records or [])
        self._today = today or default_today
        self.fetch_count = 0

    def add(self, record: ResponseRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[ResponseRecord]) -> None:
        self._records.extend(records)

    async def fetch_records(self, category_key: str, lookback_days: int) -> List[ResponseRecord]:
        self.fetch_count += 1
        cutoff = self._today() - timedelta(days=lookback_days)
        matching = [
            record for record in self._records
            if record.category_key == category_key and record.response_date >= cutoff
        ]
        return sorted(matching, key=lambda record: record.response_date)

    def __len__(self) -> int:
        return len(self._records)
