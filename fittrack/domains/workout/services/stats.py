from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime, time, timedelta
from typing import Any, Dict, Optional, Tuple

from django.db.models import Count, IntegerField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from fittrack.models import CompletionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkoutStats:
    total_count: int
    weekly_count: int
    previous_week_count: int
    percent_change: int
    is_positive: bool
    total_calories: int
    weekly_calories: int
    daily_calories: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def percent_change(current: int, previous: int) -> int:
    """0,0 -> 0 ; 3,0 -> 100 ; 4,2 -> 100"""
    if previous == 0:
        return 100 if current > 0 else 0
    # làm tròn .5 lên (không dùng round() kiểu banker)
    return math.floor((current - previous) / previous * 100 + 0.5)


def _local_midnight(d) -> datetime:
    return timezone.make_aware(datetime.combine(d, time.min))


def week_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime, datetime]:
    """
    (previous_week_start, week_start, today_start) theo timezone hiện tại.
    Tuần tính từ Chủ nhật đến Thứ 7.
    """
    now = now or timezone.now()
    today = timezone.localtime(now).date()
    # isoweekday: Mon=1..Sun=7 -> số ngày kể từ Chủ nhật gần nhất
    days_since_sunday = today.isoweekday() % 7
    week_start = _local_midnight(today - timedelta(days=days_since_sunday))
    previous_week_start = _local_midnight(today - timedelta(days=days_since_sunday + 7))
    return previous_week_start, week_start, _local_midnight(today)


def _calories_sum(condition: Optional[Q] = None) -> Coalesce:
    # calories null tính là 0
    return Coalesce(
        Sum("calories_burned", filter=condition),
        Value(0),
        output_field=IntegerField(),
    )


def get_stats(owner_id: str, *, now: Optional[datetime] = None) -> WorkoutStats:
    now = now or timezone.now()
    previous_week_start, week_start, today_start = week_bounds(now)

    this_week = Q(completed_at__gte=week_start, completed_at__lt=now)
    last_week = Q(completed_at__gte=previous_week_start, completed_at__lt=week_start)

    agg = CompletionRecord.objects.filter(owner_id=str(owner_id), completed_at__isnull=False).aggregate(
        total_count=Count("id"),
        weekly_count=Count("id", filter=this_week),
        previous_week_count=Count("id", filter=last_week),
        total_calories=_calories_sum(),
        weekly_calories=_calories_sum(Q(completed_at__gte=week_start)),
        daily_calories=_calories_sum(Q(completed_at__gte=today_start)),
    )

    weekly = agg["weekly_count"]
    previous = agg["previous_week_count"]
    stats = WorkoutStats(
        total_count=agg["total_count"],
        weekly_count=weekly,
        previous_week_count=previous,
        percent_change=percent_change(weekly, previous),
        is_positive=weekly >= previous,
        total_calories=agg["total_calories"],
        weekly_calories=agg["weekly_calories"],
        daily_calories=agg["daily_calories"],
    )
    logger.debug("[STATS] owner=%s %s", owner_id, stats)
    return stats
