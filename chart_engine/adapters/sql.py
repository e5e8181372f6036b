# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
SQL Response Store

Reads the ``pillar_responses`` table through SQLAlchemy. Queries are
blocking, so they run in a worker thread to keep the event loop free.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from chart_engine.adapters.base import BaseResponseStore
from chart_engine.date_ranges import today as default_today
from chart_engine.logger import log_timing
from chart_engine.migrations import migrate_record
from chart_engine.models import ResponseRecord
from database.orm_models import PillarResponseRow

logger = logging.getLogger(__name__)


def row_to_record(row: PillarResponseRow) -> ResponseRecord:
    return ResponseRecord(
        id=row.id,
        category_key=row.pillar,
        response_date=row.response_date,
        answers=dict(row.responses or {}),
        user_id=row.user_id,
        schema_version=row.schema_version or 1,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SQLResponseStore(BaseResponseStore):
    """Response store backed by a SQLAlchemy session factory"""

    def __init__(
        self,
        session_factory: sessionmaker,
        migrate_on_read: bool = True,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Args:
            session_factory: Factory producing sessions on the response database
            migrate_on_read: Upgrade legacy answer schemas while reading
            today: Clock for the lookback cutoff
        """
        self._session_factory = session_factory
        self.migrate_on_read = migrate_on_read
        self._today = today or default_today

    def _query(self, category_key: str, cutoff: date) -> List[ResponseRecord]:
        session: Session = self._session_factory()
        try:
            stmt = (
                select(PillarResponseRow)
                .where(PillarResponseRow.pillar == category_key)
                .where(PillarResponseRow.response_date >= cutoff)
                .order_by(PillarResponseRow.response_date.asc())
            )
            rows = session.execute(stmt).scalars().all()
            records = [row_to_record(row) for row in rows]
        finally:
            session.close()

        if self.migrate_on_read:
            records = [migrate_record(record) for record in records]
        return records

    @log_timing
    async def fetch_records(self, category_key: str, lookback_days: int) -> List[ResponseRecord]:
        cutoff = self._today() - timedelta(days=lookback_days)
        records = await asyncio.to_thread(self._query, category_key, cutoff)
        logger.debug("Fetched %d %s responses since %s", len(records), category_key, cutoff)
        return records
