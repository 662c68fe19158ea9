"""
Analytics router — thin HTTP adapter over the calculators.

POST /analytics/completion-rate   — completion % over an inclusive date range
POST /analytics/trends/{period}   — 4W / 3M / 6M / 1Y trend summary
POST /analytics/day-of-week       — per-weekday rates, best/worst day
POST /analytics/time-of-day       — hourly distribution, peaks, reminder hours
POST /analytics/month-comparison  — current vs previous month
POST /analytics/insights          — generated insights (stats computed here)
POST /analytics/summary           — streaks and lifetime completion rate
POST /analytics/report            — everything above in one payload

Insufficient history is answered with 422 `INSUFFICIENT_DATA` and
`details.minimum_required`, so clients can show "need N more days".
"""
from __future__ import annotations

from fastapi import APIRouter, Path

from habit_insights.schemas.analytics import (
    AnalyticsReportResponse,
    CompletionRateRequest,
    CompletionRateResponse,
    DayOfWeekStatsResponse,
    HabitSummaryResponse,
    InsightListResponse,
    MonthComparisonRequest,
    MonthComparisonResponse,
    RecordsRequest,
    ReportRequest,
    SummaryRequest,
    TimeDistributionResponse,
    TimedRecordsRequest,
    TrendRequest,
    TrendResponse,
)
from habit_insights.schemas.common import ErrorResponse
from habit_insights.services.day_of_week import calculate_day_of_week_stats
from habit_insights.services.insights import MIN_RECORDS_FOR_INSIGHTS, generate_insights
from habit_insights.services.month_comparison import calculate_month_comparison
from habit_insights.services.rates import calculate_completion_rate
from habit_insights.services.report import build_analytics_report
from habit_insights.services.streaks import calculate_habit_summary
from habit_insights.services.time_of_day import calculate_time_distribution
from habit_insights.services.trends import calculate_trend

router = APIRouter(prefix="/analytics", tags=["analytics"])

_INSUFFICIENT = {
    422: {"model": ErrorResponse, "description": "INSUFFICIENT_DATA or VALIDATION_ERROR."},
}
_BAD_INPUT = {
    400: {"model": ErrorResponse, "description": "CALCULATION_ERROR: malformed input."},
}


@router.post(
    "/completion-rate",
    response_model=CompletionRateResponse,
    summary="Completion rate over an inclusive date range",
    responses=_BAD_INPUT,
)
def completion_rate(body: CompletionRateRequest):
    rate = calculate_completion_rate(body.to_records(), body.start_date, body.end_date)
    return CompletionRateResponse(completion_rate=rate)


@router.post(
    "/trends/{period}",
    response_model=TrendResponse,
    response_model_exclude_none=True,
    summary="Trend for one period vs the equal-length window before it",
    responses={**_INSUFFICIENT, **_BAD_INPUT},
)
def trend(
    body: TrendRequest,
    period: str = Path(description="4W, 3M, 6M or 1Y. Anything else is a CALCULATION_ERROR."),
):
    """
    ### Minimum records in the current window
    | Period | Minimum |
    |---|---|
    | `4W` | 7 |
    | `3M` | 14 |
    | `6M` | 30 |
    | `1Y` | 60 |

    `direction` is `stable` whenever |percentage_change| ≤ 5.
    """
    result = calculate_trend(body.to_records(), period, now=body.now)
    return result.to_dict()


@router.post(
    "/day-of-week",
    response_model=DayOfWeekStatsResponse,
    summary="Per-weekday completion statistics",
    responses=_INSUFFICIENT,
)
def day_of_week(body: RecordsRequest):
    """Requires at least 28 records. Ties for best/worst go to the earliest weekday."""
    return calculate_day_of_week_stats(body.to_records()).to_dict()


@router.post(
    "/time-of-day",
    response_model=TimeDistributionResponse,
    summary="Hourly distribution of completions",
)
def time_of_day(body: TimedRecordsRequest):
    return calculate_time_distribution(body.to_records(), body.zone()).to_dict()


@router.post(
    "/month-comparison",
    response_model=MonthComparisonResponse,
    summary="Current month vs previous month",
)
def month_comparison(body: MonthComparisonRequest):
    current = [r.to_record() for r in body.current_month]
    previous = [r.to_record() for r in body.previous_month]
    return calculate_month_comparison(current, previous).to_dict()


@router.post(
    "/insights",
    response_model=InsightListResponse,
    summary="Detected behavioural patterns with recommendations",
)
def insights(body: TimedRecordsRequest):
    """
    Returns an empty list below 28 records. Day-of-week stats and the
    time distribution are computed from the same records.
    """
    records = body.to_records()
    if len(records) < MIN_RECORDS_FOR_INSIGHTS:
        return InsightListResponse(total=0, items=[])

    tz = body.zone()
    items = generate_insights(
        records,
        calculate_day_of_week_stats(records),
        calculate_time_distribution(records, tz),
        tz,
    )
    return InsightListResponse(total=len(items), items=[i.to_dict() for i in items])


@router.post(
    "/summary",
    response_model=HabitSummaryResponse,
    summary="Current/longest streak and lifetime completion rate",
    responses=_BAD_INPUT,
)
def summary(body: SummaryRequest):
    return calculate_habit_summary(body.to_records(), body.start_date, body.today).to_dict()


@router.post(
    "/report",
    response_model=AnalyticsReportResponse,
    summary="Full analytics report",
)
def report(body: ReportRequest):
    """Analyses without enough history are returned as `null` instead of failing."""
    return build_analytics_report(body.to_records(), now=body.now, tz=body.zone()).to_dict()
