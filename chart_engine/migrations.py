# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Versioned migrations of stored answer dictionaries.

Schema versions:
    1: incident counts stored under assorted field names
    2: incident counts stored under ``safety-incidents-count`` only
"""

import logging
from typing import Callable, Dict, List, Tuple

from chart_engine.models import AnswerValue, ResponseRecord

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 2

INCIDENT_COUNT_FIELD = "safety-incidents-count"

# Spellings written by older forms, most common first
LEGACY_INCIDENT_COUNT_FIELDS: Tuple[str, ...] = (
    "safety-incident-count",
    "safety_incidents_count",
    "safety-incidents",
    "incidents-count",
    "incident-count",
)

Answers = Dict[str, AnswerValue]


def _v1_to_v2(answers: Answers) -> Answers:
    """Move the first legacy incident count spelling to the canonical field"""
    migrated = dict(answers)
    legacy_keys = [key for key in LEGACY_INCIDENT_COUNT_FIELDS if key in migrated]
    if INCIDENT_COUNT_FIELD not in migrated and legacy_keys:
        migrated[INCIDENT_COUNT_FIELD] = migrated[legacy_keys[0]]
    for key in legacy_keys:
        del migrated[key]
    return migrated


# from_version -> step producing from_version + 1
MIGRATIONS: Dict[int, Callable[[Answers], Answers]] = {
    1: _v1_to_v2,
}


def migrate_answers(answers: Answers, from_version: int = 1) -> Answers:
    """
    Bring an answer dictionary up to ``CURRENT_SCHEMA_VERSION``.

    Raises:
        ValueError: If from_version is newer than the current version or
            a migration step is missing.
    """
    if from_version > CURRENT_SCHEMA_VERSION:
        raise ValueError(
            f"Schema version {from_version} is newer than supported version {CURRENT_SCHEMA_VERSION}"
        )

    migrated = dict(answers)
    for version in range(from_version, CURRENT_SCHEMA_VERSION):
        step = MIGRATIONS.get(version)
        if step is None:
            raise ValueError(f"No migration registered from schema version {version}")
        migrated = step(migrated)
    return migrated


def needs_migration(record: ResponseRecord) -> bool:
    return record.schema_version < CURRENT_SCHEMA_VERSION


def migrate_record(record: ResponseRecord) -> ResponseRecord:
    """Copy of the record with migrated answers, or the record itself when current"""
    if not needs_migration(record):
        return record
    answers = migrate_answers(record.answers, record.schema_version)
    logger.debug("Migrated record %s from schema v%d", record.id, record.schema_version)
    return record.model_copy(update={"answers": answers, "schema_version": CURRENT_SCHEMA_VERSION})


def migrate_records(records: List[ResponseRecord]) -> List[ResponseRecord]:
    return [migrate_record(record) for record in records]
