"""Dashboard statistics and review forecasts.

The pure functions take plain snapshots (review records, due times) so they can
be checked without a database; the ``get_*`` wrappers read the snapshot from
storage at call time. Nothing is cached.
"""
import math
from collections import Counter
from datetime import date, datetime, time, timedelta

from katakana_srs.db import Database
from katakana_srs.errors import InvalidInput
from katakana_srs.lessons import get_available_lessons_count
from katakana_srs.models import ReviewRecord, parse_ts
from katakana_srs.reviews import get_all_reviews
from katakana_srs.stages import TIERS, tier_label

FORECAST_DAYS = 7


def percent(part: int, whole: int) -> int:
    """Whole percent, halves rounded up; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return math.floor(part / whole * 100 + 0.5)


def accuracy_rate(correct: int, incorrect: int) -> int:
    return percent(correct, correct + incorrect)


def tier_histogram(stages) -> dict[str, int]:
    """Count of records per tier, every tier present."""
    histogram = {tier: 0 for tier in TIERS}
    for stage in stages:
        histogram[tier_label(stage)] += 1
    return histogram


def summarize(
    records: list[ReviewRecord],
    total_symbols: int,
    lessons_available: int,
    now: datetime,
) -> dict:
    horizon = now + timedelta(hours=24)
    correct = sum(r.correct_count for r in records)
    incorrect = sum(r.incorrect_count for r in records)
    return {
        "total_items": total_symbols,
        "reviews_due_now": sum(1 for r in records if r.next_due <= now),
        "reviews_due_today": sum(1 for r in records if r.next_due <= horizon),
        "accuracy_rate": accuracy_rate(correct, incorrect),
        "stage_distribution": tier_histogram(r.stage for r in records),
        "lessons_available": lessons_available,
    }


def daily_forecast(due_times: list[datetime], today: date, days: int = FORECAST_DAYS) -> list[dict]:
    """Per-day review counts for ``days`` days starting with ``today``.

    ``new_count`` is the number of items becoming due that day;
    ``cumulative_count`` is everything due by the end of that day, including
    items that were already overdue before ``today``.
    """
    start = datetime.combine(today, time.min)
    overdue = sum(1 for due in due_times if due < start)
    per_day = Counter(due.date() for due in due_times if due >= start)
    forecast = []
    running = overdue
    for offset in range(days):
        day = today + timedelta(days=offset)
        running += per_day[day]
        forecast.append({
            "date": day.isoformat(),
            "cumulative_count": running,
            "new_count": per_day[day],
        })
    return forecast


def hourly_forecast(due_times: list[datetime], day: date) -> list[dict]:
    """Per-hour review counts (0-23) for ``day``, same split as daily_forecast."""
    start = datetime.combine(day, time.min)
    overdue = sum(1 for due in due_times if due < start)
    per_hour = Counter(due.hour for due in due_times if due.date() == day)
    forecast = []
    running = overdue
    for hour in range(24):
        running += per_hour[hour]
        forecast.append({
            "hour": hour,
            "cumulative_count": running,
            "new_count": per_hour[hour],
        })
    return forecast


def _due_times(db: Database) -> list[datetime]:
    return [parse_ts(row["next_due"]) for row in db.query("SELECT next_due FROM reviews")]


def get_dashboard_stats(db: Database, now: datetime | None = None) -> dict:
    now = now or datetime.now()
    return summarize(
        get_all_reviews(db),
        total_symbols=db.scalar("SELECT COUNT(*) FROM symbols"),
        lessons_available=get_available_lessons_count(db),
        now=now,
    )


def get_upcoming_reviews(db: Database, now: datetime | None = None) -> list[dict]:
    now = now or datetime.now()
    return daily_forecast(_due_times(db), now.date())


def get_hourly_reviews(db: Database, day: date | str | None = None, now: datetime | None = None) -> list[dict]:
    """Hourly forecast for ``day``, today (per ``now``) when omitted."""
    if day is None:
        day = (now or datetime.now()).date()
    if isinstance(day, str):
        try:
            day = date.fromisoformat(day)
        except ValueError:
            raise InvalidInput(f"Not an ISO date: {day!r}") from None
    return hourly_forecast(_due_times(db), day)
