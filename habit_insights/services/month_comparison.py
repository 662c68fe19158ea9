"""
Month-over-month comparison.

Unlike the trend calculator, the rate here is completed records over
*records supplied* (each record is one scheduled day), not over calendar
days. A change of more than 20% is flagged as significant.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from habit_insights.services.rates import calculate_percentage_change
from habit_insights.services.records import (
    CompletionRecord,
    is_record_completed,
    iter_dated,
)
from habit_insights.services.trends import shift_months

SIGNIFICANCE_THRESHOLD = 20


@dataclass(frozen=True)
class MonthSummary:
    completion_rate: float
    total_completions: int
    total_scheduled: int

    def to_dict(self) -> dict:
        return {
            "completion_rate": self.completion_rate,
            "total_completions": self.total_completions,
            "total_scheduled": self.total_scheduled,
        }


@dataclass(frozen=True)
class MonthComparison:
    current_month: MonthSummary
    previous_month: MonthSummary
    percentage_change: float
    is_significant: bool

    def to_dict(self) -> dict:
        return {
            "current_month": self.current_month.to_dict(),
            "previous_month": self.previous_month.to_dict(),
            "percentage_change": self.percentage_change,
            "is_significant": self.is_significant,
        }


def _summarize(records: Sequence[CompletionRecord]) -> MonthSummary:
    completed = sum(1 for r in records if is_record_completed(r))
    scheduled = len(records)
    rate = completed * 100 / scheduled if scheduled > 0 else 0.0
    return MonthSummary(
        completion_rate=rate,
        total_completions=completed,
        total_scheduled=scheduled,
    )


def calculate_month_comparison(
    current_month_records: Sequence[CompletionRecord],
    previous_month_records: Sequence[CompletionRecord],
) -> MonthComparison:
    current = _summarize(current_month_records or ())
    previous = _summarize(previous_month_records or ())
    change = calculate_percentage_change(current.completion_rate, previous.completion_rate)
    return MonthComparison(
        current_month=current,
        previous_month=previous,
        percentage_change=change,
        is_significant=abs(change) > SIGNIFICANCE_THRESHOLD,
    )


def split_by_month(
    records: Sequence[CompletionRecord],
    now: Optional[date] = None,
) -> tuple[list[CompletionRecord], list[CompletionRecord]]:
    """
    Partition records into (month containing `now`, the month before it).
    Records outside both months, or with an unparseable date_key, are dropped.
    """
    ref = now or datetime.now(tz=timezone.utc).date()
    this_month = (ref.year, ref.month)
    prev = shift_months(ref.replace(day=1), -1)
    last_month = (prev.year, prev.month)

    current: list[CompletionRecord] = []
    previous: list[CompletionRecord] = []
    for day, record in iter_dated(records):
        key = (day.year, day.month)
        if key == this_month:
            current.append(record)
        elif key == last_month:
            previous.append(record)
    return current, previous
