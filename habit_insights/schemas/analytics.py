"""
Analytics request / response schemas.

Every request carries the habit's completion records in its body; the
API holds no data of its own.

POST /analytics/completion-rate   → CompletionRateRequest   → CompletionRateResponse
POST /analytics/trends/{period}   → TrendRequest            → TrendResponse
POST /analytics/day-of-week       → RecordsRequest          → DayOfWeekStatsResponse
POST /analytics/time-of-day       → TimedRecordsRequest     → TimeDistributionResponse
POST /analytics/month-comparison  → MonthComparisonRequest  → MonthComparisonResponse
POST /analytics/insights          → TimedRecordsRequest     → InsightListResponse
POST /analytics/summary           → SummaryRequest          → HabitSummaryResponse
POST /analytics/report            → ReportRequest           → AnalyticsReportResponse
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from habit_insights.core.config import settings
from habit_insights.services.records import CompletionRecord, parse_timestamp


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class CompletionRecordIn(BaseModel):
    """One observation for one scheduled day of a habit."""

    date_key: str = Field(
        description="Calendar day, YYYY-MM-DD. Unparseable keys are skipped, not rejected.",
        examples=["2026-02-20"],
    )
    completed_at: Optional[datetime] = Field(
        default=None,
        description="Actual completion timestamp (used for hour-of-day analysis). "
                    "Unparseable values are treated as missing.",
    )
    is_completed: Optional[bool] = Field(
        default=None,
        description="Completion flag. Takes precedence over `status` when present.",
    )
    status: Optional[str] = Field(
        default=None,
        description='Legacy flag: missing, empty or "done" means completed.',
        examples=["done", "not_done"],
    )
    progress_value: Optional[float] = Field(
        default=None,
        description="Magnitude for count/duration habits.",
    )
    habit_id: Optional[str] = None

    @field_validator("completed_at", mode="before")
    @classmethod
    def drop_unparseable_timestamp(cls, v):
        if isinstance(v, str):
            return parse_timestamp(v)
        return v

    def to_record(self) -> CompletionRecord:
        return CompletionRecord(
            date_key=self.date_key,
            completed_at=self.completed_at,
            is_completed=self.is_completed,
            status=self.status,
            progress_value=self.progress_value,
            habit_id=self.habit_id,
        )


def _check_size(records: list) -> list:
    if len(records) > settings.MAX_RECORDS:
        raise ValueError(f"at most {settings.MAX_RECORDS} records are accepted per request")
    return records


class RecordsRequest(BaseModel):
    records: Annotated[list[CompletionRecordIn], Field(
        description="Completion history of a single habit.",
    )]

    @field_validator("records")
    @classmethod
    def check_size(cls, v: list) -> list:
        return _check_size(v)

    def to_records(self) -> list[CompletionRecord]:
        return [r.to_record() for r in self.records]


class TimedRecordsRequest(RecordsRequest):
    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone for hour-of-day analysis. Defaults to the server setting.",
        examples=["Europe/Madrid"],
    )

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {v}") from None
        return v

    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone or settings.DEFAULT_TIMEZONE)


class CompletionRateRequest(RecordsRequest):
    start_date: date
    end_date: date


class TrendRequest(RecordsRequest):
    now: Optional[date] = Field(
        default=None,
        description="Reference day for the windows. Defaults to today (UTC).",
    )


class MonthComparisonRequest(BaseModel):
    current_month: list[CompletionRecordIn]
    previous_month: list[CompletionRecordIn]

    @model_validator(mode="after")
    def check_size(self) -> "MonthComparisonRequest":
        _check_size(self.current_month + self.previous_month)
        return self


class SummaryRequest(RecordsRequest):
    start_date: date = Field(description="Day the habit was created.")
    today: Optional[date] = None


class ReportRequest(TimedRecordsRequest):
    now: Optional[date] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class CompletionRateResponse(BaseModel):
    completion_rate: float = Field(description="Percentage of days completed. Range: 0–100.")


class DataPointOut(BaseModel):
    date: str
    value: int


class TrendResponse(BaseModel):
    period: str = Field(examples=["4W"])
    completion_rate: float
    average_progress: Optional[float] = Field(
        default=None,
        description="Progress per calendar day; omitted when no record carries progress.",
    )
    percentage_change: float
    direction: str = Field(description='"up" | "down" | "stable"')
    data_points: list[DataPointOut] = Field(description="One entry per day, oldest first.")


class DayStatsOut(BaseModel):
    completion_rate: float
    total_completions: int
    total_scheduled: int


class DayOfWeekStatsResponse(BaseModel):
    monday: DayStatsOut
    tuesday: DayStatsOut
    wednesday: DayStatsOut
    thursday: DayStatsOut
    friday: DayStatsOut
    saturday: DayStatsOut
    sunday: DayStatsOut
    best_day: str
    worst_day: str


class TimeDistributionResponse(BaseModel):
    hourly_distribution: dict[int, int]
    peak_hours: list[int]
    optimal_reminder_times: list[int]


class MonthSummaryOut(BaseModel):
    completion_rate: float
    total_completions: int
    total_scheduled: int


class MonthComparisonResponse(BaseModel):
    current_month: MonthSummaryOut
    previous_month: MonthSummaryOut
    percentage_change: float
    is_significant: bool = Field(description="True when |percentage_change| > 20.")


class InsightOut(BaseModel):
    id: str
    type: str
    message: str
    confidence: str = Field(description='"high" | "medium" | "low"')
    data_support: int
    actionable: bool
    recommendation: Optional[str] = None


class InsightListResponse(BaseModel):
    total: int
    items: list[InsightOut]


class HabitSummaryResponse(BaseModel):
    current_streak: int
    longest_streak: int
    completion_rate: float
    total_days: int
    completed_days: int


class AnalyticsReportResponse(BaseModel):
    reference_date: str
    habit_id: Optional[str] = None
    trends: dict[str, Optional[TrendResponse]]
    day_of_week_stats: Optional[DayOfWeekStatsResponse] = None
    time_distribution: TimeDistributionResponse
    month_comparison: MonthComparisonResponse
    insights: list[InsightOut]
    data_point_count: int
    oldest_data_point: Optional[str] = None
    newest_data_point: Optional[str] = None
