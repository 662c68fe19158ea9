"""
Tests for the habit summary (streaks + lifetime rate).

Reference history, 2026-03-01 .. 2026-03-10:
  01 ✓  02 ✓  03 ✗  04 ✓  05 ✓  06 ✓  07 -  08 ✓  09 -  10 ✓
"""
from datetime import date

import pytest

from habit_insights.core.errors import CalculationError
from habit_insights.services.records import CompletionRecord
from habit_insights.services.streaks import calculate_habit_summary

_START = date(2026, 3, 1)
_TODAY = date(2026, 3, 10)


def _history(**overrides) -> list[CompletionRecord]:
    marks = {1: True, 2: True, 3: False, 4: True, 5: True, 6: True, 8: True, 10: True}
    marks.update(overrides.get("marks", {}))
    return [
        CompletionRecord(date_key=date(2026, 3, day).isoformat(), is_completed=done)
        for day, done in marks.items()
    ]


class TestHabitSummary:
    def test_reference_history(self):
        summary = calculate_habit_summary(_history(), _START, _TODAY)
        assert summary.current_streak == 5
        assert summary.longest_streak == 5
        assert summary.completed_days == 7
        assert summary.total_days == 10
        assert summary.completion_rate == 70.0

    def test_missing_days_neither_extend_nor_break(self):
        # 09 has no record; streak counts 10, 08, 06, 05, 04
        summary = calculate_habit_summary(_history(), _START, _TODAY)
        assert summary.current_streak == 5

    def test_today_not_completed_resets_current(self):
        records = _history(marks={10: False})
        summary = calculate_habit_summary(records, _START, _TODAY)
        assert summary.current_streak == 0
        assert summary.longest_streak == 4

    def test_longest_run_before_a_break(self):
        records = [
            CompletionRecord(date_key=f"2026-03-{d:02d}", is_completed=d != 5)
            for d in range(1, 11)
        ]
        summary = calculate_habit_summary(records, _START, _TODAY)
        assert summary.longest_streak == 5   # 06..10
        assert summary.current_streak == 5

    def test_any_non_done_status_breaks_streak(self):
        records = [
            CompletionRecord(date_key="2026-03-08", status="done"),
            CompletionRecord(date_key="2026-03-09", status="skipped"),
            CompletionRecord(date_key="2026-03-10", status="done"),
        ]
        summary = calculate_habit_summary(records, date(2026, 3, 8), _TODAY)
        assert summary.current_streak == 1
        assert summary.longest_streak == 1

    def test_records_outside_range_ignored(self):
        records = _history() + [
            CompletionRecord(date_key="2026-02-28", is_completed=True),
            CompletionRecord(date_key="2026-03-11", is_completed=True),
        ]
        summary = calculate_habit_summary(records, _START, _TODAY)
        assert summary.completed_days == 7

    def test_first_record_of_a_day_wins(self):
        records = [
            CompletionRecord(date_key="2026-03-10", is_completed=True),
            CompletionRecord(date_key="2026-03-10", is_completed=False),
        ]
        summary = calculate_habit_summary(records, _TODAY, _TODAY)
        assert summary.current_streak == 1
        assert summary.completed_days == 1
        assert summary.completion_rate == 100.0

    def test_rate_rounded_to_one_decimal(self):
        records = [CompletionRecord(date_key="2026-03-01", status="done")]
        summary = calculate_habit_summary(records, _START, date(2026, 3, 3))
        assert summary.completion_rate == 33.3

    def test_no_records(self):
        summary = calculate_habit_summary([], _START, _TODAY)
        assert summary.current_streak == 0
        assert summary.longest_streak == 0
        assert summary.completion_rate == 0.0

    def test_start_after_today_raises(self):
        with pytest.raises(CalculationError):
            calculate_habit_summary([], _TODAY, _START)

    def test_invalid_start_raises(self):
        with pytest.raises(CalculationError):
            calculate_habit_summary([], "whenever", _TODAY)

    def test_to_dict(self):
        payload = calculate_habit_summary(_history(), "2026-03-01", "2026-03-10").to_dict()
        assert payload == {
            "current_streak": 5,
            "longest_streak": 5,
            "completion_rate": 70.0,
            "total_days": 10,
            "completed_days": 7,
        }
