"""
Integration tests for the analytics endpoints.
"""
from datetime import date

import pytest


def _payload(records) -> list[dict]:
    out = []
    for r in records:
        item = {"date_key": r.date_key, "status": r.status}
        if r.completed_at is not None:
            item["completed_at"] = r.completed_at.isoformat()
        out.append(item)
    return out


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["version"] == "1.0.0"


class TestCompletionRate:
    def test_rate(self, client, make_records):
        records = make_records(date(2026, 3, 1), 4)
        r = client.post("/analytics/completion-rate", json={
            "records": _payload(records),
            "start_date": "2026-03-01",
            "end_date": "2026-03-10",
        })
        assert r.status_code == 200
        assert r.json() == {"completion_rate": 40.0}


class TestTrends:
    def test_four_week_trend(self, client, make_records):
        records = make_records(date(2026, 2, 1), 29)
        r = client.post("/analytics/trends/4W", json={
            "records": _payload(records),
            "now": "2026-03-01",
        })
        assert r.status_code == 200
        body = r.json()
        assert body["period"] == "4W"
        assert body["completion_rate"] == 100.0
        assert body["percentage_change"] == 100.0
        assert body["direction"] == "up"
        assert len(body["data_points"]) == 29
        assert body["data_points"][0] == {"date": "2026-02-01", "value": 1}
        # no progress values → field omitted
        assert "average_progress" not in body

    def test_average_progress_included_when_present(self, client):
        records = [
            {"date_key": f"2026-02-{d:02d}", "progress_value": 3} for d in range(22, 29)
        ]
        r = client.post("/analytics/trends/4W", json={"records": records, "now": "2026-02-28"})
        assert r.status_code == 200
        assert r.json()["average_progress"] == pytest.approx(21 / 29)


class TestDayOfWeek:
    def test_mon_wed_fri(self, client, eight_weeks_mwf):
        r = client.post("/analytics/day-of-week", json={"records": _payload(eight_weeks_mwf)})
        assert r.status_code == 200
        body = r.json()
        assert body["best_day"] == "monday"
        assert body["worst_day"] == "tuesday"
        assert body["friday"]["completion_rate"] == 100.0
        assert body["sunday"]["total_scheduled"] == 8


class TestTimeOfDay:
    def test_hours_converted_to_requested_zone(self, client):
        r = client.post("/analytics/time-of-day", json={
            "records": [{"date_key": "2026-03-01", "completed_at": "2026-03-01T23:30:00Z"}],
            "timezone": "Europe/Madrid",
        })
        assert r.status_code == 200
        body = r.json()
        # JSON object keys are strings
        assert body["hourly_distribution"]["0"] == 1
        assert len(body["hourly_distribution"]) == 24
        assert body["peak_hours"] == [0]
        assert body["optimal_reminder_times"] == [23]

    def test_default_zone_is_utc(self, client):
        r = client.post("/analytics/time-of-day", json={
            "records": [{"date_key": "2026-03-01", "completed_at": "2026-03-01T23:30:00Z"}],
        })
        assert r.json()["peak_hours"] == [23]


class TestMonthComparison:
    def test_significant_improvement(self, client):
        def month(prefix, done, total):
            return [
                {"date_key": f"{prefix}-{i + 1:02d}", "is_completed": i < done}
                for i in range(total)
            ]

        r = client.post("/analytics/month-comparison", json={
            "current_month": month("2026-03", 8, 10),
            "previous_month": month("2026-02", 5, 10),
        })
        assert r.status_code == 200
        body = r.json()
        assert body["current_month"]["completion_rate"] == pytest.approx(80)
        assert body["percentage_change"] == pytest.approx(60)
        assert body["is_significant"] is True


class TestInsights:
    def test_short_history_returns_empty_list(self, client, make_records):
        records = make_records(date(2026, 2, 1), 27)
        r = client.post("/analytics/insights", json={"records": _payload(records)})
        assert r.status_code == 200
        assert r.json() == {"total": 0, "items": []}

    def test_mon_wed_fri_morning(self, client, eight_weeks_mwf_morning):
        r = client.post("/analytics/insights", json={"records": _payload(eight_weeks_mwf_morning)})
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 4
        assert [i["type"] for i in body["items"]] == [
            "day-of-week-pattern",
            "time-of-day-pattern",
            "weekend-behavior",
            "timing-impact",
        ]
        assert all(i["actionable"] for i in body["items"])


class TestSummary:
    def test_streaks(self, client):
        marks = {1: True, 2: True, 3: False, 4: True, 5: True, 6: True, 8: True, 10: True}
        r = client.post("/analytics/summary", json={
            "records": [
                {"date_key": f"2026-03-{d:02d}", "is_completed": done}
                for d, done in marks.items()
            ],
            "start_date": "2026-03-01",
            "today": "2026-03-10",
        })
        assert r.status_code == 200
        assert r.json() == {
            "current_streak": 5,
            "longest_streak": 5,
            "completion_rate": 70.0,
            "total_days": 10,
            "completed_days": 7,
        }


class TestReport:
    def test_full_report(self, client, eight_weeks_mwf):
        r = client.post("/analytics/report", json={
            "records": _payload(eight_weeks_mwf),
            "now": "2026-03-01",
        })
        assert r.status_code == 200
        body = r.json()
        assert body["reference_date"] == "2026-03-01"
        assert body["data_point_count"] == 56
        assert body["trends"]["1Y"] is None
        assert body["trends"]["4W"]["period"] == "4W"
        assert body["day_of_week_stats"]["best_day"] == "monday"
        assert len(body["insights"]) == 2
        assert body["month_comparison"]["is_significant"] is True

    def test_empty_report(self, client):
        r = client.post("/analytics/report", json={"records": [], "now": "2026-03-01"})
        assert r.status_code == 200
        body = r.json()
        assert body["day_of_week_stats"] is None
        assert body["insights"] == []
        assert body["oldest_data_point"] is None
