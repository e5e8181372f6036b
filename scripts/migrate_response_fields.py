#!/usr/bin/env python3
"""
Response Field Migration Script

Rewrites stored pillar responses to the current answer schema, e.g. moving
legacy incident count spellings to ``safety-incidents-count``.

Usage:
    python scripts/migrate_response_fields.py [--dry-run] [--pillar safety] [--batch-size 100]
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from chart_engine.logger import get_logger  # noqa: E402
from chart_engine.migrations import CURRENT_SCHEMA_VERSION, migrate_answers  # noqa: E402
from database.connection import create_db_engine, get_session_factory, init_db  # noqa: E402
from database.orm_models import PillarResponseRow  # noqa: E402

logger = logging.getLogger("chart_engine.scripts.migrate_response_fields")

DEFAULT_BATCH_SIZE = 100


def migrate_rows(
    session: Session,
    pillar: Optional[str] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    dry_run: bool = False,
) -> int:
    """
    Migrate every row below the current schema version.

    Returns:
        Number of rows migrated (or that would be, in dry-run mode)
    """
    stmt = select(PillarResponseRow).where(PillarResponseRow.schema_version < CURRENT_SCHEMA_VERSION)
    if pillar:
        stmt = stmt.where(PillarResponseRow.pillar == pillar)
    stmt = stmt.order_by(PillarResponseRow.response_date.asc())

    migrated = 0
    pending = 0
    for row in session.execute(stmt).scalars():
        answers = migrate_answers(dict(row.responses or {}), row.schema_version or 1)
        migrated += 1
        if dry_run:
            logger.info("Would migrate %s (%s, %s)", row.id, row.pillar, row.response_date)
            continue
        row.responses = answers
        row.schema_version = CURRENT_SCHEMA_VERSION
        pending += 1
        if pending >= batch_size:
            session.commit()
            logger.info("Committed batch of %d rows", pending)
            pending = 0

    if pending and not dry_run:
        session.commit()
        logger.info("Committed batch of %d rows", pending)

    return migrated


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Migrate stored pillar responses to the current answer schema")
    parser.add_argument("--database-url", help="Database URL (default: CHART_ENGINE_DATABASE_URL)")
    parser.add_argument("--pillar", help="Migrate only this pillar")
    parser.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE, help="Rows per commit (default: 100)")
    parser.add_argument("--dry-run", action="store_true", help="Report rows without changing them")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    get_logger("chart_engine", level="DEBUG" if args.verbose else "INFO")

    engine = create_db_engine(args.database_url)
    init_db(engine)
    session = get_session_factory(engine)()
    try:
        count = migrate_rows(session, args.pillar, args.batch_size, args.dry_run)
    except Exception as e:
        session.rollback()
        logger.error("Migration failed: %s", e, exc_info=True)
        return 1
    finally:
        session.close()

    verb = "would be migrated" if args.dry_run else "migrated"
    logger.info("%d rows %s to schema v%d", count, verb, CURRENT_SCHEMA_VERSION)
    return 0


if __name__ == "__main__":
    sys.exit(main())
