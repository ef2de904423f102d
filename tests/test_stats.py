from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest

from fittrack.models import CompletionRecord
from fittrack.domains.workout.services.stats import get_stats, percent_change, week_bounds

from .conftest import OTHER_OWNER, OWNER

UTC = dt_timezone.utc
# Wednesday
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "current, previous, expected",
    [(0, 0, 0), (3, 0, 100), (4, 2, 100), (1, 2, -50), (2, 3, -33), (3, 2, 50), (5, 5, 0), (9, 8, 13), (1, 8, -87), (1, 40, -97), (7, 2, 250)],
)
def test_percent_change(current, previous, expected):
    assert percent_change(current, previous) == expected


class TestWeekBounds:
    def test_midweek(self):
        prev_start, week_start, today_start = week_bounds(NOW)
        assert week_start == datetime(2026, 10, 11, tzinfo=UTC)
        assert prev_start == week_start - timedelta(days=7)
        assert today_start == datetime(2026, 10, 14, tzinfo=UTC)

    def test_sunday_starts_the_week(self):
        _, week_start, today_start = week_bounds(datetime(2026, 10, 11, 10, 0, tzinfo=UTC))
        assert week_start == today_start == datetime(2026, 10, 11, tzinfo=UTC)

    def test_saturday_is_the_last_day(self):
        _, week_start, _ = week_bounds(datetime(2026, 10, 17, 23, 59, tzinfo=UTC))
        assert week_start == datetime(2026, 10, 11, tzinfo=UTC)

    def test_uses_current_timezone(self, settings):
        settings.TIME_ZONE = "Asia/Ho_Chi_Minh"
        # Saturday 20:00 UTC is already Sunday 03:00 in UTC+7
        _, week_start, _ = week_bounds(datetime(2026, 10, 10, 20, 0, tzinfo=UTC))
        assert week_start == datetime(2026, 10, 10, 17, 0, tzinfo=UTC)


@pytest.mark.django_db
class TestGetStats:
    def _log(self, plan, completed_at, calories=None, owner_id=OWNER):
        return CompletionRecord.objects.create(
            owner_id=owner_id, plan=plan, completed_at=completed_at, calories_burned=calories, notes=""
        )

    def test_counts_and_calories(self, make_plan):
        plan = make_plan()
        self._log(plan, datetime(2026, 10, 11, 0, 0, tzinfo=UTC), 100)
        self._log(plan, datetime(2026, 10, 13, 18, 0, tzinfo=UTC), None)
        self._log(plan, datetime(2026, 10, 14, 8, 0, tzinfo=UTC), 200)
        self._log(plan, datetime(2026, 10, 4, 0, 0, tzinfo=UTC), 50)
        self._log(plan, datetime(2026, 10, 10, 23, 59, tzinfo=UTC), 70)
        self._log(plan, datetime(2026, 9, 1, 9, 0, tzinfo=UTC), 30)
        self._log(plan, None, 999)
        self._log(make_plan(owner_id=OTHER_OWNER), datetime(2026, 10, 14, 9, 0, tzinfo=UTC), 500, owner_id=OTHER_OWNER)

        stats = get_stats(OWNER, now=NOW)

        assert stats.total_count == 6
        assert stats.weekly_count == 3
        assert stats.previous_week_count == 2
        assert stats.percent_change == 50
        assert stats.is_positive is True
        assert stats.total_calories == 450
        assert stats.weekly_calories == 300
        assert stats.daily_calories == 200

    def test_no_history(self, db):
        stats = get_stats(OWNER, now=NOW)
        assert stats.as_dict() == {
            "total_count": 0,
            "weekly_count": 0,
            "previous_week_count": 0,
            "percent_change": 0,
            "is_positive": True,
            "total_calories": 0,
            "weekly_calories": 0,
            "daily_calories": 0,
        }

    def test_fewer_workouts_than_last_week(self, make_plan):
        plan = make_plan()
        self._log(plan, datetime(2026, 10, 5, 7, 0, tzinfo=UTC))
        self._log(plan, datetime(2026, 10, 6, 7, 0, tzinfo=UTC))
        self._log(plan, datetime(2026, 10, 12, 7, 0, tzinfo=UTC))

        stats = get_stats(OWNER, now=NOW)

        assert (stats.weekly_count, stats.previous_week_count) == (1, 2)
        assert stats.percent_change == -50
        assert stats.is_positive is False
