"""
Shared builders for tests: records, a settable clock and the reference date.
"""

from datetime import date, datetime, timedelta
from itertools import count
from typing import Any, Dict, Optional

from chart_engine.models import ResponseRecord

# Wednesday
REFERENCE_DATE = date(2024, 5, 15)

_ids = count(1)


class FakeClock:
    """Settable clock for cache and service tests"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_record(
    response_date: date,
    incidents: Any = None,
    pillar: str = "safety",
    answers: Optional[Dict[str, Any]] = None,
    schema_version: int = 2,
) -> ResponseRecord:
    """Build a record; ``incidents`` fills the canonical incident count field"""
    payload = dict(answers or {})
    if incidents is not None:
        payload["safety-incidents-count"] = incidents
    return ResponseRecord(
        id=f"rec-{next(_ids)}",
        category_key=pillar,
        response_date=response_date,
        answers=payload,
        schema_version=schema_version,
    )
