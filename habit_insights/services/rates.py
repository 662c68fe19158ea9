"""
Completion-rate primitives shared by every higher-level calculator.

Public API
----------
calculate_completion_rate(records, start_date, end_date) -> float   0–100
calculate_percentage_change(current, previous)           -> float   signed
"""
from __future__ import annotations

import math
from datetime import date
from typing import Sequence

from habit_insights.core.errors import CalculationError, HabitInsightsException
from habit_insights.services.records import (
    CompletionRecord,
    DateLike,
    is_record_completed,
    iter_dated,
    parse_date_key,
)


def _require_date(value: DateLike, name: str) -> date:
    parsed = parse_date_key(value)
    if parsed is None:
        raise CalculationError(
            f"Invalid {name}: {value!r}",
            details={name: str(value)},
        )
    return parsed


def calculate_completion_rate(
    records: Sequence[CompletionRecord],
    start_date: DateLike,
    end_date: DateLike,
) -> float:
    """
    Percentage of calendar days in [start_date, end_date] (inclusive)
    that have a completed record.

    Raises CalculationError for unparseable dates, an inverted range or a
    NaN result. Records with an unparseable date_key are skipped.
    """
    if records is None:
        raise CalculationError("No completion data provided")

    start = _require_date(start_date, "start_date")
    end = _require_date(end_date, "end_date")
    if end < start:
        raise CalculationError(
            "Invalid date range: end date must not be before start date",
            details={"start_date": str(start), "end_date": str(end)},
        )

    try:
        total_days = (end - start).days + 1
        completed_days = sum(
            1
            for day, record in iter_dated(records)
            if start <= day <= end and is_record_completed(record)
        )
        rate = completed_days * 100 / total_days
    except HabitInsightsException:
        raise
    except Exception as exc:
        raise CalculationError(f"Failed to calculate completion rate: {exc}") from exc

    if math.isnan(rate):
        raise CalculationError("Calculation resulted in invalid number")
    return max(0.0, min(100.0, rate))


def calculate_percentage_change(current: float, previous: float) -> float:
    """
    Relative change from `previous` to `current`, in percent.

    A zero baseline has no meaningful ratio: any positive current value
    reports +100, zero reports 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100
