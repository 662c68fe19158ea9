"""
Tests for the month-over-month comparison.
"""
from datetime import date

import pytest

from habit_insights.services.month_comparison import (
    calculate_month_comparison,
    split_by_month,
)
from habit_insights.services.records import CompletionRecord


def _month(completed: int, total: int, prefix: str = "2026-03") -> list[CompletionRecord]:
    return [
        CompletionRecord(date_key=f"{prefix}-{i + 1:02d}", is_completed=i < completed)
        for i in range(total)
    ]


class TestMonthComparison:
    def test_80_vs_50_is_significant_60_percent(self):
        result = calculate_month_comparison(_month(8, 10), _month(5, 10, "2026-02"))
        assert result.current_month.completion_rate == pytest.approx(80)
        assert result.previous_month.completion_rate == pytest.approx(50)
        assert result.percentage_change == pytest.approx(60)
        assert result.is_significant is True

    def test_counts(self):
        result = calculate_month_comparison(_month(8, 10), _month(5, 10, "2026-02"))
        assert result.current_month.total_completions == 8
        assert result.current_month.total_scheduled == 10
        assert result.previous_month.total_completions == 5

    def test_empty_months(self):
        result = calculate_month_comparison([], [])
        assert result.current_month.completion_rate == 0
        assert result.percentage_change == 0
        assert result.is_significant is False

    def test_empty_previous_month_with_progress(self):
        result = calculate_month_comparison(_month(1, 4), [])
        assert result.percentage_change == 100
        assert result.is_significant is True

    def test_exactly_20_percent_is_not_significant(self):
        # 60% vs 50% → +20%
        result = calculate_month_comparison(_month(6, 10), _month(5, 10, "2026-02"))
        assert result.percentage_change == pytest.approx(20)
        assert result.is_significant is False

    def test_drop_is_significant(self):
        result = calculate_month_comparison(_month(2, 10), _month(5, 10, "2026-02"))
        assert result.percentage_change == pytest.approx(-60)
        assert result.is_significant is True

    def test_status_precedence_applies(self):
        records = [
            CompletionRecord(date_key="2026-03-01", status="done"),
            CompletionRecord(date_key="2026-03-02", status="not_done"),
            CompletionRecord(date_key="2026-03-03"),
            CompletionRecord(date_key="2026-03-04", is_completed=False, status="done"),
        ]
        result = calculate_month_comparison(records, [])
        assert result.current_month.total_completions == 2
        assert result.current_month.completion_rate == 50


class TestSplitByMonth:
    def test_partitions_current_and_previous(self):
        records = (
            _month(3, 3, "2026-03")
            + _month(2, 2, "2026-02")
            + _month(1, 1, "2026-01")
            + [CompletionRecord(date_key="bad")]
        )
        current, previous = split_by_month(records, now=date(2026, 3, 15))
        assert len(current) == 3
        assert len(previous) == 2

    def test_previous_month_crosses_year(self):
        records = _month(1, 1, "2025-12") + _month(1, 1, "2026-01")
        current, previous = split_by_month(records, now=date(2026, 1, 31))
        assert [r.date_key for r in current] == ["2026-01-01"]
        assert [r.date_key for r in previous] == ["2025-12-01"]
