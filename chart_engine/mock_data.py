"""
Mock data generators for chart development and testing.

Provides realistic daily pillar responses without needing a database.
"""

import random
from datetime import date, timedelta
from typing import List, Optional
from uuid import uuid4

from chart_engine.date_ranges import today as default_today
from chart_engine.migrations import CURRENT_SCHEMA_VERSION, INCIDENT_COUNT_FIELD
from chart_engine.models import ResponseRecord


class MockResponseGenerator:
    """Generates realistic daily responses for pillar charts"""

    INCIDENT_ANSWERS = ["0", "1", "2 or more"]
    INCIDENT_WEIGHTS = [0.75, 0.18, 0.07]

    INCIDENT_DESCRIPTIONS = [
        "Slip on wet floor",
        "Forklift near miss",
        "Cut from sheet metal",
        "Missing guard on press",
        "Chemical splash",
        "Ladder fall",
        "Pinched finger at conveyor",
    ]

    USERS = ["shift-lead-a", "shift-lead-b", "supervisor"]

    def __init__(self, seed: int = 42):
        """Initialize with a random seed for reproducibility"""
        self._rng = random.Random(seed)

    def generate_safety_response(
        self,
        response_date: date,
        incident_answer: Optional[str] = None,
        legacy_field: Optional[str] = None,
    ) -> ResponseRecord:
        """
        Generate a single safety response

        Args:
            response_date: Date of the response
            incident_answer: Fixed answer ("0", "1", "2 or more"); random when omitted
            legacy_field: Store the count under this old field name as a v1 record
        """
        if incident_answer is None:
            incident_answer = self._rng.choices(self.INCIDENT_ANSWERS, weights=self.INCIDENT_WEIGHTS)[0]

        field = legacy_field or INCIDENT_COUNT_FIELD
        answers = {field: incident_answer}

        incidents = 2 if incident_answer == "2 or more" else int(incident_answer)
        for number in range(1, incidents + 1):
            answers[f"safety-incident-{number}-description"] = self._rng.choice(self.INCIDENT_DESCRIPTIONS)

        return ResponseRecord(
            id=str(uuid4()),
            category_key="safety",
            response_date=response_date,
            answers=answers,
            user_id=self._rng.choice(self.USERS),
            schema_version=1 if legacy_field else CURRENT_SCHEMA_VERSION,
        )

    def generate_safety_history(
        self,
        days: int = 180,
        end_date: Optional[date] = None,
        weekdays_only: bool = True,
        skip_probability: float = 0.1,
    ) -> List[ResponseRecord]:
        """Daily safety responses for the last ``days`` days, oldest first"""
        end_date = end_date or default_today()
        records = []
        for offset in range(days - 1, -1, -1):
            day = end_date - timedelta(days=offset)
            if weekdays_only and day.weekday() >= 5:
                continue
            if self._rng.random() < skip_probability:
                continue
            records.append(self.generate_safety_response(day))
        return records

    def generate_numeric_history(
        self,
        category: str,
        field: str,
        days: int = 90,
        end_date: Optional[date] = None,
        low: float = 80,
        high: float = 100,
    ) -> List[ResponseRecord]:
        """Daily numeric answers (e.g. a quality score) for another pillar"""
        end_date = end_date or default_today()
        return [
            ResponseRecord(
                id=str(uuid4()),
                category_key=category,
                response_date=end_date - timedelta(days=offset),
                answers={field: round(self._rng.uniform(low, high), 1)},
                user_id=self._rng.choice(self.USERS),
                schema_version=CURRENT_SCHEMA_VERSION,
            )
            for offset in range(days - 1, -1, -1)
        ]
