"""
Shared pytest fixtures.

The engine is pure computation, so the only shared state is the
FastAPI TestClient; record builders live as fixtures so every test
module constructs histories the same way.
"""
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from habit_insights.main import app
from habit_insights.services.records import CompletionRecord

# Monday. Eight full weeks from here end on Sunday 2026-03-01.
EIGHT_WEEKS_START = date(2026, 1, 5)
EIGHT_WEEKS_END = date(2026, 3, 1)


def daily_records(
    start: date,
    days: int,
    completed=lambda d: True,
    hour: int | None = None,
) -> list[CompletionRecord]:
    """One record per day from `start`; `completed(day)` decides the status."""
    records = []
    for i in range(days):
        day = start + timedelta(days=i)
        done = completed(day)
        records.append(CompletionRecord(
            date_key=day.isoformat(),
            status="done" if done else "not_done",
            completed_at=(
                datetime(day.year, day.month, day.day, hour, 30)
                if done and hour is not None
                else None
            ),
        ))
    return records


def mon_wed_fri(day: date) -> bool:
    return day.weekday() in (0, 2, 4)


@pytest.fixture()
def make_records():
    return daily_records


@pytest.fixture()
def eight_weeks_mwf() -> list[CompletionRecord]:
    """56 daily records, completed only on Mon/Wed/Fri (24 completions)."""
    return daily_records(EIGHT_WEEKS_START, 56, completed=mon_wed_fri)


@pytest.fixture()
def eight_weeks_mwf_morning() -> list[CompletionRecord]:
    """Same history with every completion stamped at 07:30."""
    return daily_records(EIGHT_WEEKS_START, 56, completed=mon_wed_fri, hour=7)


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c
