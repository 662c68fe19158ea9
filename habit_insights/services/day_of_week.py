"""
Day-of-week analyzer — per-weekday completion rates plus best/worst day.

Every record with a parseable date counts as "scheduled" on its weekday;
completed records also count as completions. Best/worst are chosen by
scanning Monday → Sunday with strict comparisons, so on a tie the
earliest weekday wins. Requires at least 28 records (4 weeks).
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from habit_insights.core.errors import (
    CalculationError,
    HabitInsightsException,
    InsufficientDataError,
)
from habit_insights.services.records import (
    CompletionRecord,
    is_record_completed,
    iter_dated,
)

logger = logging.getLogger(__name__)

MIN_RECORDS = 28


class Weekday(str, enum.Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Iteration order for tie-breaking; index matches date.weekday().
WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)
WORKDAYS: tuple[Weekday, ...] = WEEKDAYS[:5]
WEEKEND: tuple[Weekday, ...] = WEEKDAYS[5:]


@dataclass(frozen=True)
class DayStats:
    completion_rate: float   # 0–100
    total_completions: int
    total_scheduled: int

    def to_dict(self) -> dict:
        return {
            "completion_rate": self.completion_rate,
            "total_completions": self.total_completions,
            "total_scheduled": self.total_scheduled,
        }


@dataclass(frozen=True)
class DayOfWeekStats:
    monday: DayStats
    tuesday: DayStats
    wednesday: DayStats
    thursday: DayStats
    friday: DayStats
    saturday: DayStats
    sunday: DayStats
    best_day: Weekday
    worst_day: Weekday

    def for_day(self, day: Weekday) -> DayStats:
        return getattr(self, Weekday(day).value)

    def items(self) -> Iterator[tuple[Weekday, DayStats]]:
        """(weekday, stats) pairs, Monday first."""
        for day in WEEKDAYS:
            yield day, self.for_day(day)

    def to_dict(self) -> dict:
        payload = {day.value: stats.to_dict() for day, stats in self.items()}
        payload["best_day"] = self.best_day.value
        payload["worst_day"] = self.worst_day.value
        return payload


def _day_stats(completed: int, scheduled: int) -> DayStats:
    rate = completed * 100 / scheduled if scheduled > 0 else 0.0
    return DayStats(
        completion_rate=rate,
        total_completions=completed,
        total_scheduled=scheduled,
    )


def _best_and_worst(stats: dict[Weekday, DayStats]) -> tuple[Weekday, Weekday]:
    best = worst = Weekday.MONDAY
    highest, lowest = -1.0, 101.0
    for day in WEEKDAYS:
        day_stats = stats[day]
        if day_stats.total_scheduled == 0:
            continue
        if day_stats.completion_rate > highest:
            highest = day_stats.completion_rate
            best = day
        if day_stats.completion_rate < lowest:
            lowest = day_stats.completion_rate
            worst = day
    return best, worst


def calculate_day_of_week_stats(records: Sequence[CompletionRecord]) -> DayOfWeekStats:
    """Bucket records by weekday; raises InsufficientDataError below 28 records."""
    if records is None:
        raise CalculationError("No completion data provided")
    if len(records) < MIN_RECORDS:
        logger.info("Day-of-week analysis needs %d records, got %d", MIN_RECORDS, len(records))
        raise InsufficientDataError(
            "Need at least 4 weeks of data for day-of-week analysis",
            minimum_required=MIN_RECORDS,
        )

    try:
        completed = {day: 0 for day in WEEKDAYS}
        scheduled = {day: 0 for day in WEEKDAYS}
        for on, record in iter_dated(records):
            weekday = WEEKDAYS[on.weekday()]
            scheduled[weekday] += 1
            if is_record_completed(record):
                completed[weekday] += 1

        stats = {day: _day_stats(completed[day], scheduled[day]) for day in WEEKDAYS}
        best, worst = _best_and_worst(stats)
    except HabitInsightsException:
        raise
    except Exception as exc:
        raise CalculationError(f"Failed to calculate day-of-week statistics: {exc}") from exc

    return DayOfWeekStats(
        **{day.value: stats[day] for day in WEEKDAYS},
        best_day=best,
        worst_day=worst,
    )
