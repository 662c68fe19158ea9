"""
Trend calculator — completion rate over a current window vs. the
equal-length window right before it.

Period table
------------
  period   current window      comparison starts   minimum records
  4W       now-4w  .. now       now-8w              7
  3M       now-3m  .. now       now-6m              14
  6M       now-6m  .. now       now-12m             30
  1Y       now-1y  .. now       now-2y              60

Month arithmetic clamps to the last day of the target month
(e.g. May 31 minus 3 months is Feb 28/29).

Public API
----------
calculate_trend(records, period, now=None)  -> TrendData
calculate_all_trends(records, now=None)     -> dict[TrendPeriod, TrendData | None]
"""
from __future__ import annotations

import calendar
import enum
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence, Union

from habit_insights.core.errors import (
    CalculationError,
    HabitInsightsException,
    InsufficientDataError,
)
from habit_insights.services.rates import (
    calculate_completion_rate,
    calculate_percentage_change,
)
from habit_insights.services.records import (
    CompletionRecord,
    is_record_completed,
    iter_dated,
)

logger = logging.getLogger(__name__)

# |percentage_change| at or below this is reported as "stable"
STABLE_THRESHOLD = 5


class TrendPeriod(str, enum.Enum):
    FOUR_WEEKS = "4W"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"


class TrendDirection(str, enum.Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class _PeriodConfig:
    weeks: int = 0
    months: int = 0
    minimum_records: int = 0

    def shift_back(self, ref: date, times: int = 1) -> date:
        if self.weeks:
            return ref - timedelta(weeks=self.weeks * times)
        return shift_months(ref, -self.months * times)


PERIOD_CONFIG: dict[TrendPeriod, _PeriodConfig] = {
    TrendPeriod.FOUR_WEEKS:   _PeriodConfig(weeks=4, minimum_records=7),
    TrendPeriod.THREE_MONTHS: _PeriodConfig(months=3, minimum_records=14),
    TrendPeriod.SIX_MONTHS:   _PeriodConfig(months=6, minimum_records=30),
    TrendPeriod.ONE_YEAR:     _PeriodConfig(months=12, minimum_records=60),
}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DataPoint:
    date: str    # YYYY-MM-DD
    value: int   # 1 if any completed record on that day, else 0

    def to_dict(self) -> dict:
        return {"date": self.date, "value": self.value}


@dataclass(frozen=True)
class TrendData:
    period: TrendPeriod
    completion_rate: float            # 0–100
    percentage_change: float          # signed, unbounded
    direction: TrendDirection
    data_points: tuple[DataPoint, ...] = field(default_factory=tuple)
    average_progress: Optional[float] = None   # None when no progress data

    def to_dict(self) -> dict:
        payload = {
            "period": self.period.value,
            "completion_rate": self.completion_rate,
            "percentage_change": self.percentage_change,
            "direction": self.direction.value,
            "data_points": [p.to_dict() for p in self.data_points],
        }
        if self.average_progress is not None:
            payload["average_progress"] = self.average_progress
        return payload


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def shift_months(ref: date, months: int) -> date:
    """Move `ref` by a signed number of months, clamping the day of month."""
    index = ref.year * 12 + (ref.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(ref.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _coerce_period(period: Union[TrendPeriod, str]) -> TrendPeriod:
    try:
        return TrendPeriod(period)
    except ValueError:
        raise CalculationError(
            f"Invalid time period: {period!r}",
            details={"period": str(period), "allowed": [p.value for p in TrendPeriod]},
        ) from None


def _direction(percentage_change: float) -> TrendDirection:
    if abs(percentage_change) <= STABLE_THRESHOLD:
        return TrendDirection.STABLE
    return TrendDirection.UP if percentage_change > 0 else TrendDirection.DOWN


def _average_progress(
    current: list[tuple[date, CompletionRecord]],
    window_days: int,
) -> Optional[float]:
    """Sum of progress values divided by calendar days in the window."""
    values = [
        float(r.progress_value)
        for _, r in current
        if isinstance(r.progress_value, (int, float))
        and not isinstance(r.progress_value, bool)
        and not math.isnan(r.progress_value)
    ]
    if not values:
        return None
    return sum(values) / window_days


def _build_data_points(
    dated: list[tuple[date, CompletionRecord]],
    start: date,
    end: date,
) -> tuple[DataPoint, ...]:
    completed_days = {day for day, record in dated if is_record_completed(record)}
    points = []
    day = start
    while day <= end:
        points.append(DataPoint(date=day.isoformat(), value=1 if day in completed_days else 0))
        day += timedelta(days=1)
    return tuple(points)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def calculate_trend(
    records: Sequence[CompletionRecord],
    period: Union[TrendPeriod, str],
    now: Optional[date] = None,
) -> TrendData:
    """
    Trend summary for one period.

    Raises InsufficientDataError when the current window holds fewer
    records than the period's minimum, CalculationError for an unknown
    period or malformed input.
    """
    if records is None:
        raise CalculationError("No completion data provided")

    trend_period = _coerce_period(period)
    config = PERIOD_CONFIG[trend_period]
    end = now or _today()
    if isinstance(end, datetime):
        end = end.date()

    try:
        window_start = config.shift_back(end)
        comparison_start = config.shift_back(end, times=2)

        dated = list(iter_dated(records))
        current = [(d, r) for d, r in dated if window_start <= d <= end]

        if len(current) < config.minimum_records:
            logger.info(
                "Trend %s needs %d records, window has %d",
                trend_period.value, config.minimum_records, len(current),
            )
            raise InsufficientDataError(
                f"Need at least {config.minimum_records} data points "
                f"for {trend_period.value} trend analysis",
                minimum_required=config.minimum_records,
            )

        completion_rate = calculate_completion_rate(
            [r for _, r in current], window_start, end
        )

        previous = [r for d, r in dated if comparison_start <= d < window_start]
        previous_rate = (
            calculate_completion_rate(
                previous, comparison_start, window_start - timedelta(days=1)
            )
            if previous
            else 0.0
        )

        percentage_change = calculate_percentage_change(completion_rate, previous_rate)
        if math.isnan(percentage_change):
            raise CalculationError("Failed to calculate percentage change")

        window_days = (end - window_start).days + 1
        return TrendData(
            period=trend_period,
            completion_rate=completion_rate,
            percentage_change=percentage_change,
            direction=_direction(percentage_change),
            data_points=_build_data_points(dated, window_start, end),
            average_progress=_average_progress(current, window_days),
        )
    except HabitInsightsException:
        raise
    except Exception as exc:
        raise CalculationError(
            f"Failed to calculate trend for {trend_period.value}: {exc}"
        ) from exc


def calculate_all_trends(
    records: Sequence[CompletionRecord],
    now: Optional[date] = None,
) -> dict[TrendPeriod, Optional[TrendData]]:
    """All four periods; a period without enough history maps to None."""
    end = now or _today()
    trends: dict[TrendPeriod, Optional[TrendData]] = {}
    for period in TrendPeriod:
        try:
            trends[period] = calculate_trend(records, period, now=end)
        except InsufficientDataError:
            trends[period] = None
    return trends
