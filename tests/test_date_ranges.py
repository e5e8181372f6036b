"""
Tests for calendar date range calculations.
"""

import calendar
from datetime import date, datetime

import pytest

from chart_engine.date_ranges import (
    format_date_string,
    format_day_label,
    format_month_label,
    in_range,
    month_as_weeks,
    multi_month,
    parse_date,
    work_week,
)


class TestWorkWeek:
    """Test work week calculation"""

    def test_wednesday_gives_monday_to_friday(self):
        """A Wednesday maps to Monday..Friday of the same week"""
        days = work_week(date(2024, 5, 15))

        assert days == [date(2024, 5, d) for d in range(13, 18)]
        assert [d.weekday() for d in days] == [0, 1, 2, 3, 4]

    def test_weekend_maps_to_prior_week(self):
        """Saturday and Sunday fall back to the week that just ended"""
        assert work_week(date(2024, 5, 18))[0] == date(2024, 5, 13)
        assert work_week(date(2024, 5, 19))[0] == date(2024, 5, 13)

    def test_monday_and_datetime_input(self):
        """Monday starts its own week and time of day is ignored"""
        assert work_week(date(2024, 5, 13))[0] == date(2024, 5, 13)
        assert work_week(datetime(2024, 5, 17, 23, 30)) == work_week(date(2024, 5, 17))

    def test_week_across_month_boundary(self):
        """Work week may span two months"""
        days = work_week(date(2024, 5, 31))
        assert days[0] == date(2024, 5, 27)
        assert days[-1] == date(2024, 5, 31)
        assert work_week(date(2024, 7, 2))[0] == date(2024, 7, 1)


class TestMonthAsWeeks:
    """Test month partitioning into Monday-Sunday weeks"""

    def test_may_2024(self):
        """May 2024 starts on a Wednesday and spans five weeks"""
        weeks = month_as_weeks(date(2024, 5, 15))

        assert len(weeks) == 5
        assert [w.label for w in weeks] == [f"Week {n}" for n in range(1, 6)]
        assert weeks[0].start_date == date(2024, 4, 29)
        assert weeks[0].dates[0] == date(2024, 5, 1)
        assert weeks[-1].end_date == date(2024, 6, 2)
        assert weeks[-1].dates[-1] == date(2024, 5, 31)

    def test_weeks_are_monday_to_sunday(self):
        """Every week is a full Monday-Sunday span"""
        for week in month_as_weeks(date(2024, 2, 10)):
            assert week.start_date.weekday() == 0
            assert week.end_date.weekday() == 6
            assert (week.end_date - week.start_date).days == 6

    @pytest.mark.parametrize("year,month", [
        (2024, 1), (2024, 2), (2024, 4), (2024, 9), (2023, 2), (2021, 2), (2026, 3),
    ])
    def test_member_days_cover_month_exactly_once(self, year, month):
        """The union of member days is exactly the month, with no day in two weeks"""
        weeks = month_as_weeks(date(year, month, 1))
        member_days = [d for week in weeks for d in week.dates]
        expected = [date(year, month, d) for d in range(1, calendar.monthrange(year, month)[1] + 1)]

        assert sorted(member_days) == expected
        assert len(member_days) == len(set(member_days))
        assert [w.week_number for w in weeks] == list(range(1, len(weeks) + 1))

    def test_month_starting_on_monday(self):
        """A month starting on Monday has no leading partial week"""
        weeks = month_as_weeks(date(2024, 7, 20))
        assert weeks[0].start_date == date(2024, 7, 1)
        assert len(weeks[0].dates) == 7


class TestMultiMonth:
    """Test multi-month windows"""

    def test_three_months_oldest_first(self):
        """Three whole months ending at the reference month"""
        months = multi_month(3, date(2024, 5, 15))

        assert [m.label for m in months] == ["Mar", "Apr", "May"]
        assert months[0].start_date == date(2024, 3, 1)
        assert months[1].end_date == date(2024, 4, 30)
        assert months[2].end_date == date(2024, 5, 31)

    def test_year_rollover(self):
        """Windows crossing New Year keep the right years"""
        months = multi_month(3, date(2024, 1, 10))

        assert [(m.year, m.month) for m in months] == [(2023, 11), (2023, 12), (2024, 1)]

    def test_leap_february(self):
        """February end date follows leap years"""
        assert multi_month(1, date(2024, 2, 3))[0].end_date == date(2024, 2, 29)
        assert multi_month(1, date(2023, 2, 3))[0].end_date == date(2023, 2, 28)

    def test_invalid_count(self):
        """Fewer than one month is rejected"""
        with pytest.raises(ValueError):
            multi_month(0, date(2024, 5, 15))


class TestInRange:
    """Test inclusive range membership"""

    def test_boundaries_inclusive(self):
        assert in_range(date(2024, 5, 13), date(2024, 5, 13), date(2024, 5, 17))
        assert in_range(date(2024, 5, 17), date(2024, 5, 13), date(2024, 5, 17))
        assert not in_range(date(2024, 5, 18), date(2024, 5, 13), date(2024, 5, 17))
        assert not in_range(date(2024, 5, 12), date(2024, 5, 13), date(2024, 5, 17))

    def test_time_of_day_normalized(self):
        """End is ceiled to the end of its day and start floored to midnight"""
        assert in_range(datetime(2024, 5, 17, 23, 59), date(2024, 5, 13), datetime(2024, 5, 17, 8, 0))
        assert in_range(datetime(2024, 5, 13, 0, 0), datetime(2024, 5, 13, 9, 0), date(2024, 5, 17))
        assert not in_range(datetime(2024, 5, 18, 0, 0), date(2024, 5, 13), date(2024, 5, 17))


class TestFormatting:
    """Test label helpers"""

    def test_labels(self):
        assert format_date_string(date(2024, 5, 3)) == "2024-05-03"
        assert format_day_label(date(2024, 5, 3)) == "05/03"
        assert format_month_label(date(2024, 12, 1)) == "Dec"

    def test_parse_date(self):
        assert parse_date("2024-05-03") == date(2024, 5, 3)
        assert parse_date("2024-05-03T10:15:00Z") == date(2024, 5, 3)
        assert parse_date(datetime(2024, 5, 3, 10)) == date(2024, 5, 3)
