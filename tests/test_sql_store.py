"""
Tests for the SQLAlchemy response store and the field migration script.
"""

from datetime import date, timedelta

import pytest

from chart_engine.adapters.sql import SQLResponseStore
from chart_engine.migrations import CURRENT_SCHEMA_VERSION, INCIDENT_COUNT_FIELD
from database.connection import create_db_engine, get_session_factory, init_db
from database.orm_models import PillarResponseRow
from scripts.migrate_response_fields import migrate_rows
from tests.factories import REFERENCE_DATE


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def seeded(session_factory):
    """Rows for two pillars, one of them far outside any lookback and one legacy"""
    session = session_factory()
    session.add_all([
        PillarResponseRow(
            pillar="safety",
            response_date=REFERENCE_DATE,
            responses={INCIDENT_COUNT_FIELD: "1"},
            schema_version=2,
        ),
        PillarResponseRow(
            pillar="safety",
            response_date=REFERENCE_DATE - timedelta(days=3),
            responses={"safety-incident-count": "2 or more"},
            schema_version=1,
        ),
        PillarResponseRow(
            pillar="safety",
            response_date=REFERENCE_DATE - timedelta(days=200),
            responses={INCIDENT_COUNT_FIELD: "0"},
            schema_version=2,
        ),
        PillarResponseRow(
            pillar="quality",
            response_date=REFERENCE_DATE,
            responses={"score": 97},
            schema_version=2,
        ),
    ])
    session.commit()
    session.close()
    return session_factory


class TestSQLResponseStore:
    """Test reading responses through SQLAlchemy"""

    @pytest.mark.asyncio
    async def test_filters_and_orders(self, seeded):
        store = SQLResponseStore(seeded, today=lambda: REFERENCE_DATE)

        records = await store.fetch_records("safety", 30)

        assert [r.response_date for r in records] == [REFERENCE_DATE - timedelta(days=3), REFERENCE_DATE]
        assert all(r.category_key == "safety" for r in records)

    @pytest.mark.asyncio
    async def test_legacy_rows_migrated_on_read(self, seeded):
        store = SQLResponseStore(seeded, today=lambda: REFERENCE_DATE)

        legacy = (await store.fetch_records("safety", 30))[0]

        assert legacy.schema_version == CURRENT_SCHEMA_VERSION
        assert legacy.answers == {INCIDENT_COUNT_FIELD: "2 or more"}

    @pytest.mark.asyncio
    async def test_migration_on_read_can_be_disabled(self, seeded):
        store = SQLResponseStore(seeded, migrate_on_read=False, today=lambda: REFERENCE_DATE)

        legacy = (await store.fetch_records("safety", 30))[0]

        assert legacy.schema_version == 1
        assert "safety-incident-count" in legacy.answers

    @pytest.mark.asyncio
    async def test_unknown_pillar(self, seeded):
        store = SQLResponseStore(seeded, today=lambda: REFERENCE_DATE)

        assert await store.fetch_records("delivery", 30) == []


class TestMigrationScript:
    """Test rewriting stored rows to the current schema"""

    def test_dry_run_changes_nothing(self, seeded):
        session = seeded()
        try:
            assert migrate_rows(session, dry_run=True) == 1
            row = session.query(PillarResponseRow).filter_by(schema_version=1).one()
            assert "safety-incident-count" in row.responses
        finally:
            session.close()

    def test_rows_rewritten(self, seeded):
        session = seeded()
        try:
            assert migrate_rows(session, pillar="safety", batch_size=1) == 1
        finally:
            session.close()

        session = seeded()
        try:
            rows = session.query(PillarResponseRow).filter_by(pillar="safety").all()
            assert all(row.schema_version == CURRENT_SCHEMA_VERSION for row in rows)
            migrated = [row for row in rows if row.response_date == date(2024, 5, 12)][0]
            assert migrated.responses == {INCIDENT_COUNT_FIELD: "2 or more"}
            assert migrate_rows(session) == 0
        finally:
            session.close()
