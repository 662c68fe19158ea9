from habit_insights.services.confidence import ConfidenceLevel, calculate_confidence
from habit_insights.services.day_of_week import (
    DayOfWeekStats,
    DayStats,
    Weekday,
    calculate_day_of_week_stats,
)
from habit_insights.services.insights import Insight, InsightType, generate_insights
from habit_insights.services.month_comparison import (
    MonthComparison,
    MonthSummary,
    calculate_month_comparison,
    split_by_month,
)
from habit_insights.services.rates import calculate_completion_rate, calculate_percentage_change
from habit_insights.services.records import CompletionRecord, is_record_completed
from habit_insights.services.report import AnalyticsReport, build_analytics_report
from habit_insights.services.streaks import HabitSummary, calculate_habit_summary
from habit_insights.services.time_of_day import TimeDistribution, calculate_time_distribution
from habit_insights.services.trends import (
    DataPoint,
    TrendData,
    TrendDirection,
    TrendPeriod,
    calculate_all_trends,
    calculate_trend,
)

__all__ = [
    "AnalyticsReport",
    "CompletionRecord",
    "ConfidenceLevel",
    "DataPoint",
    "DayOfWeekStats",
    "DayStats",
    "HabitSummary",
    "Insight",
    "InsightType",
    "MonthComparison",
    "MonthSummary",
    "TimeDistribution",
    "TrendData",
    "TrendDirection",
    "TrendPeriod",
    "Weekday",
    "build_analytics_report",
    "calculate_all_trends",
    "calculate_completion_rate",
    "calculate_confidence",
    "calculate_day_of_week_stats",
    "calculate_habit_summary",
    "calculate_month_comparison",
    "calculate_percentage_change",
    "calculate_time_distribution",
    "calculate_trend",
    "generate_insights",
    "is_record_completed",
    "split_by_month",
]
