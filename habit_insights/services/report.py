"""
Full analytics report — every calculator run over one habit's history.

Analyses whose minimum-sample gate is not met are reported as None
instead of failing the whole report; insights are only generated when
day-of-week stats are available. The report is returned to the caller,
never stored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from habit_insights.core.errors import InsufficientDataError
from habit_insights.services.day_of_week import DayOfWeekStats, calculate_day_of_week_stats
from habit_insights.services.insights import Insight, generate_insights
from habit_insights.services.month_comparison import (
    MonthComparison,
    calculate_month_comparison,
    split_by_month,
)
from habit_insights.services.records import CompletionRecord, iter_dated
from habit_insights.services.time_of_day import TimeDistribution, calculate_time_distribution
from habit_insights.services.trends import TrendData, TrendPeriod, calculate_all_trends

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsReport:
    reference_date: date
    habit_id: Optional[str]
    trends: Mapping[TrendPeriod, Optional[TrendData]]
    day_of_week_stats: Optional[DayOfWeekStats]
    time_distribution: TimeDistribution
    month_comparison: MonthComparison
    insights: tuple[Insight, ...]
    data_point_count: int
    oldest_data_point: Optional[date]
    newest_data_point: Optional[date]

    def to_dict(self) -> dict:
        return {
            "reference_date": self.reference_date.isoformat(),
            "habit_id": self.habit_id,
            "trends": {
                period.value: trend.to_dict() if trend is not None else None
                for period, trend in self.trends.items()
            },
            "day_of_week_stats": (
                self.day_of_week_stats.to_dict() if self.day_of_week_stats else None
            ),
            "time_distribution": self.time_distribution.to_dict(),
            "month_comparison": self.month_comparison.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
            "data_point_count": self.data_point_count,
            "oldest_data_point": (
                self.oldest_data_point.isoformat() if self.oldest_data_point else None
            ),
            "newest_data_point": (
                self.newest_data_point.isoformat() if self.newest_data_point else None
            ),
        }


def _habit_id(records: Sequence[CompletionRecord]) -> Optional[str]:
    for record in records:
        if record.habit_id:
            return record.habit_id
    return None


def build_analytics_report(
    records: Sequence[CompletionRecord],
    now: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> AnalyticsReport:
    ref = now or datetime.now(tz=timezone.utc).date()
    records = list(records or ())

    try:
        day_stats: Optional[DayOfWeekStats] = calculate_day_of_week_stats(records)
    except InsufficientDataError:
        day_stats = None

    distribution = calculate_time_distribution(records, tz)
    current_month, previous_month = split_by_month(records, ref)
    insights = (
        generate_insights(records, day_stats, distribution, tz)
        if day_stats is not None
        else []
    )

    dates = [day for day, _ in iter_dated(records)]
    logger.debug("Built analytics report for %d records (%d dated)", len(records), len(dates))

    return AnalyticsReport(
        reference_date=ref,
        habit_id=_habit_id(records),
        trends=MappingProxyType(calculate_all_trends(records, now=ref)),
        day_of_week_stats=day_stats,
        time_distribution=distribution,
        month_comparison=calculate_month_comparison(current_month, previous_month),
        insights=tuple(insights),
        data_point_count=len(records),
        oldest_data_point=min(dates) if dates else None,
        newest_data_point=max(dates) if dates else None,
    )
