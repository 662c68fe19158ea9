"""
Habit summary — streaks and lifetime completion rate.

Streak rules
------------
  * a completed record extends the streak;
  * a day with no record is skipped: it neither extends nor breaks it;
  * a record that is explicitly not completed breaks it.

"Not completed" follows the shared precedence rule in records.py, so any
status other than missing, empty or "done" (e.g. "skipped") breaks a streak,
not only "not_done". The legacy app broke streaks on "not_done" only.

current_streak counts backwards from `today` to the habit start date
(0 if today itself is marked not completed). longest_streak is the
longest run between two breaks anywhere in [start_date, today].

Public API
----------
calculate_habit_summary(records, start_date, today=None) -> HabitSummary
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

from habit_insights.core.errors import CalculationError
from habit_insights.services.records import (
    CompletionRecord,
    DateLike,
    is_record_completed,
    iter_dated,
    parse_date_key,
)


@dataclass(frozen=True)
class HabitSummary:
    current_streak: int
    longest_streak: int
    completion_rate: float   # 0–100, one decimal
    total_days: int          # calendar days since start, inclusive
    completed_days: int

    def to_dict(self) -> dict:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "completion_rate": self.completion_rate,
            "total_days": self.total_days,
            "completed_days": self.completed_days,
        }


def _first_record_per_day(records: Sequence[CompletionRecord]) -> dict[date, bool]:
    """date -> completed flag, keeping the first record seen for each day."""
    by_day: dict[date, bool] = {}
    for day, record in iter_dated(records):
        by_day.setdefault(day, is_record_completed(record))
    return by_day


def _current_streak(by_day: dict[date, bool], start: date, today: date) -> int:
    streak = 0
    day = today
    while day >= start:
        done = by_day.get(day)
        if done is False:
            break
        if done:
            streak += 1
        day -= timedelta(days=1)
    return streak


def _longest_streak(by_day: dict[date, bool], start: date, today: date) -> int:
    longest = run = 0
    day = start
    while day <= today:
        done = by_day.get(day)
        if done:
            run += 1
        elif done is False:
            longest = max(longest, run)
            run = 0
        day += timedelta(days=1)
    return max(longest, run)


def calculate_habit_summary(
    records: Sequence[CompletionRecord],
    start_date: DateLike,
    today: Optional[DateLike] = None,
) -> HabitSummary:
    start = parse_date_key(start_date)
    if start is None:
        raise CalculationError(
            f"Invalid start_date: {start_date!r}",
            details={"start_date": str(start_date)},
        )
    end = parse_date_key(today) if today is not None else datetime.now(tz=timezone.utc).date()
    if end is None:
        raise CalculationError(f"Invalid today: {today!r}", details={"today": str(today)})
    if start > end:
        raise CalculationError(
            "Habit start date is after the reference day",
            details={"start_date": str(start), "today": str(end)},
        )

    by_day = _first_record_per_day(records)
    in_range = {d: done for d, done in by_day.items() if start <= d <= end}

    total_days = (end - start).days + 1
    completed_days = sum(1 for done in in_range.values() if done)
    rate = round(completed_days * 100 / total_days, 1)

    return HabitSummary(
        current_streak=_current_streak(in_range, start, end),
        longest_streak=_longest_streak(in_range, start, end),
        completion_rate=rate,
        total_days=total_days,
        completed_days=completed_days,
    )
