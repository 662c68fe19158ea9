"""
Time-of-day analyzer — completions per local hour, peak hours and
suggested reminder times.

No minimum-sample gate: callers that use the distribution for insights
apply their own threshold.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from habit_insights.services.records import CompletionRecord, completed_with_timestamp

HOURS = tuple(range(24))
MAX_PEAK_HOURS = 3


@dataclass(frozen=True)
class TimeDistribution:
    hourly_distribution: Mapping[int, int]     # hour 0–23 → completed count, read-only
    peak_hours: tuple[int, ...]                # busiest first
    optimal_reminder_times: tuple[int, ...]    # one hour before each peak

    @property
    def total_completions(self) -> int:
        return sum(self.hourly_distribution.values())

    def to_dict(self) -> dict:
        return {
            "hourly_distribution": dict(self.hourly_distribution),
            "peak_hours": list(self.peak_hours),
            "optimal_reminder_times": list(self.optimal_reminder_times),
        }


def reminder_hour_for(hour: int) -> int:
    """The hour just before `hour`, wrapping midnight."""
    return (hour - 1 + 24) % 24


def calculate_time_distribution(
    records: Sequence[CompletionRecord],
    tz: Optional[tzinfo] = None,
) -> TimeDistribution:
    hourly = {hour: 0 for hour in HOURS}
    for hour in completed_with_timestamp(records, tz):
        hourly[hour] += 1

    # sorted() is stable, so equal counts keep ascending hour order
    ranked = sorted(HOURS, key=lambda h: hourly[h], reverse=True)
    peak_hours = tuple(h for h in ranked if hourly[h] > 0)[:MAX_PEAK_HOURS]

    reminders: list[int] = []
    for hour in peak_hours:
        reminder = reminder_hour_for(hour)
        if reminder not in reminders:
            reminders.append(reminder)

    return TimeDistribution(
        hourly_distribution=MappingProxyType(hourly),
        peak_hours=peak_hours,
        optimal_reminder_times=tuple(reminders),
    )
