"""
Insight generator — natural-language observations about a habit.

Detectors (run in this order, each yields at most one insight)
--------------------------------------------------------------
  1. DAY_OF_WEEK_PATTERN
     Trigger : spread between best and worst scheduled weekday rate > 15 pts
     Signal  : (record count, spread)

  2. TIME_OF_DAY_PATTERN
     Trigger : peak hours hold > 30% of timestamped completions
     Signal  : (record count, peak share)

  3. WEEKEND_BEHAVIOR
     Trigger : |weekend avg rate - weekday avg rate| > 15 pts
     Signal  : (record count, gap)

  4. TIMING_IMPACT
     Trigger : >= 14 timestamped completions and > 60% of them before noon
     Signal  : (timestamped completions, early share)

Values exactly at a threshold do not fire. Fewer than 28 records yields no
insights at all. "No pattern" is never an error, the detector just stays
silent. STREAK_CORRELATION is a reserved type that nothing emits yet.

Insight ids are derived from type + message, so identical input always
produces identical output.
"""
from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional, Sequence

from habit_insights.services.confidence import ConfidenceLevel, calculate_confidence
from habit_insights.services.day_of_week import (
    WEEKDAYS,
    WEEKEND,
    WORKDAYS,
    DayOfWeekStats,
    DayStats,
)
from habit_insights.services.records import CompletionRecord, completed_with_timestamp
from habit_insights.services.time_of_day import TimeDistribution, reminder_hour_for


class InsightType(str, enum.Enum):
    DAY_OF_WEEK_PATTERN = "day-of-week-pattern"
    TIME_OF_DAY_PATTERN = "time-of-day-pattern"
    WEEKEND_BEHAVIOR = "weekend-behavior"
    TIMING_IMPACT = "timing-impact"
    STREAK_CORRELATION = "streak-correlation"


# Thresholds
MIN_RECORDS_FOR_INSIGHTS = 28
_DAY_VARIANCE_THRESHOLD = 15
_PEAK_SHARE_THRESHOLD = 30
_WEEKEND_GAP_THRESHOLD = 15
_EARLY_SHARE_THRESHOLD = 60
_MIN_TIMED_COMPLETIONS = 14
_NOON = 12


@dataclass(frozen=True)
class Insight:
    id: str
    type: InsightType
    message: str
    confidence: ConfidenceLevel
    data_support: int          # sample size backing the conclusion
    actionable: bool
    recommendation: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "message": self.message,
            "confidence": self.confidence.value,
            "data_support": self.data_support,
            "actionable": self.actionable,
            "recommendation": self.recommendation,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _insight_id(insight_type: InsightType, message: str) -> str:
    digest = hashlib.sha1(f"{insight_type.value}:{message}".encode("utf-8")).hexdigest()
    return f"{insight_type.value}-{digest[:12]}"


def _make_insight(
    insight_type: InsightType,
    message: str,
    confidence: ConfidenceLevel,
    data_support: int,
    recommendation: str,
) -> Insight:
    return Insight(
        id=_insight_id(insight_type, message),
        type=insight_type,
        message=message,
        confidence=confidence,
        data_support=data_support,
        actionable=True,
        recommendation=recommendation,
    )


def format_hour(hour: int) -> str:
    """12-hour clock label, e.g. 0 -> '12:00 AM', 15 -> '3:00 PM'."""
    if hour == 0:
        return "12:00 AM"
    if hour == 12:
        return "12:00 PM"
    if hour < 12:
        return f"{hour}:00 AM"
    return f"{hour - 12}:00 PM"


def _scheduled(stats: DayOfWeekStats, days) -> list[DayStats]:
    return [stats.for_day(d) for d in days if stats.for_day(d).total_scheduled > 0]


def _mean_rate(day_stats: list[DayStats]) -> float:
    return sum(s.completion_rate for s in day_stats) / len(day_stats)


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------

def detect_day_of_week_pattern(stats: DayOfWeekStats, data_points: int) -> Optional[Insight]:
    rates = [s.completion_rate for s in _scheduled(stats, WEEKDAYS)]
    if len(rates) < 2:
        return None

    variance = max(rates) - min(rates)
    if variance <= _DAY_VARIANCE_THRESHOLD:
        return None

    best, worst = stats.best_day, stats.worst_day
    best_rate = stats.for_day(best).completion_rate
    worst_rate = stats.for_day(worst).completion_rate
    return _make_insight(
        InsightType.DAY_OF_WEEK_PATTERN,
        message=(
            f"You're {best_rate:.0f}% more likely to complete this habit on "
            f"{best.label}s compared to {worst.label}s "
            f"({worst_rate:.0f}% completion rate)."
        ),
        confidence=calculate_confidence(data_points, variance),
        data_support=data_points,
        recommendation=(
            f"Consider scheduling important tasks on {best.label}s when you're most "
            f"consistent, and add extra reminders on {worst.label}s."
        ),
    )


def detect_time_of_day_pattern(
    distribution: TimeDistribution, data_points: int
) -> Optional[Insight]:
    if not distribution.peak_hours:
        return None
    total = distribution.total_completions
    if total == 0:
        return None

    peak_completions = sum(distribution.hourly_distribution.get(h, 0) for h in distribution.peak_hours)
    peak_percentage = peak_completions * 100 / total
    if peak_percentage <= _PEAK_SHARE_THRESHOLD:
        return None

    primary = distribution.peak_hours[0]
    return _make_insight(
        InsightType.TIME_OF_DAY_PATTERN,
        message=(
            f"You complete this habit most often around {format_hour(primary)}, "
            f"accounting for {peak_percentage:.0f}% of your completions."
        ),
        confidence=calculate_confidence(data_points, peak_percentage),
        data_support=data_points,
        recommendation=(
            f"Set your reminders for {format_hour(reminder_hour_for(primary))} "
            "to align with your natural rhythm."
        ),
    )


def detect_weekend_behavior(stats: DayOfWeekStats, data_points: int) -> Optional[Insight]:
    weekday_stats = _scheduled(stats, WORKDAYS)
    if not weekday_stats:
        return None
    weekend_stats = _scheduled(stats, WEEKEND)
    if not weekend_stats:
        return None

    weekday_avg = _mean_rate(weekday_stats)
    weekend_avg = _mean_rate(weekend_stats)
    difference = abs(weekend_avg - weekday_avg)
    if difference <= _WEEKEND_GAP_THRESHOLD:
        return None

    if weekend_avg > weekday_avg:
        better, worse, better_rate, worse_rate = "weekends", "weekdays", weekend_avg, weekday_avg
    else:
        better, worse, better_rate, worse_rate = "weekdays", "weekends", weekday_avg, weekend_avg

    return _make_insight(
        InsightType.WEEKEND_BEHAVIOR,
        message=(
            f"Your completion rate is {difference:.0f}% higher on {better} "
            f"({better_rate:.0f}%) compared to {worse} ({worse_rate:.0f}%)."
        ),
        confidence=calculate_confidence(data_points, difference),
        data_support=data_points,
        recommendation=(
            f"Focus extra attention on {worse} by setting additional reminders "
            "or adjusting your routine."
        ),
    )


def detect_early_day_correlation(
    records: Sequence[CompletionRecord],
    tz: Optional[tzinfo] = None,
) -> Optional[Insight]:
    hours = completed_with_timestamp(records, tz)
    if len(hours) < _MIN_TIMED_COMPLETIONS:
        return None

    early = sum(1 for h in hours if h < _NOON)
    early_percentage = early * 100 / len(hours)
    if early_percentage <= _EARLY_SHARE_THRESHOLD:
        return None

    return _make_insight(
        InsightType.TIMING_IMPACT,
        message=(
            f"You complete this habit {early_percentage:.0f}% of the time before noon, "
            "suggesting morning completion works best for you."
        ),
        confidence=calculate_confidence(len(hours), early_percentage),
        data_support=len(hours),
        recommendation="Try to complete this habit in the morning when you're most likely to succeed.",
    )


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

def generate_insights(
    records: Sequence[CompletionRecord],
    day_of_week_stats: DayOfWeekStats,
    time_distribution: TimeDistribution,
    tz: Optional[tzinfo] = None,
) -> list[Insight]:
    """
    Run every detector against already computed stats.
    Returns an empty list when there are fewer than 28 records.
    """
    if not records or len(records) < MIN_RECORDS_FOR_INSIGHTS:
        return []

    count = len(records)
    candidates = (
        detect_day_of_week_pattern(day_of_week_stats, count),
        detect_time_of_day_pattern(time_distribution, count),
        detect_weekend_behavior(day_of_week_stats, count),
        detect_early_day_correlation(records, tz),
    )
    return [insight for insight in candidates if insight is not None]
