import csv
import io
from datetime import date, timedelta

import pytest

from axis6.modules.analytics.aggregations import (
    best_and_worst_days,
    category_stats,
    mood_trend,
    streak_analysis,
    summarize_day,
    weekly_buckets,
    weekly_stats,
)
from axis6.modules.analytics.exporter import CSV_COLUMNS, build_csv_export, build_json_export
from axis6.modules.analytics.service import AnalyticsService
from tests.conftest import FIXED_TODAY, USER_ID, add_checkin

CATEGORIES = {
    1: {"id": 1, "slug": "physical", "name": {"en": "Physical"}, "color": "#65D39A"},
    2: {"id": 2, "slug": "mental", "name": {"en": "Mental"}, "color": "#9B8AE6"},
}


def checkin(category_id, day, mood=None, notes=None):
    return {"category_id": category_id, "completed_at": day, "mood": mood, "notes": notes}


def test_summarize_day():
    summary = summarize_day([checkin(1, "2025-03-10", 4), checkin(2, "2025-03-10", None)], 6)
    assert summary == {"categories_completed": 2, "total_mood": 4, "completion_rate": 0.33}

    assert summarize_day([], 6) is None
    assert summarize_day([checkin(1, "2025-03-10")], 6)["total_mood"] is None
    assert summarize_day([checkin(1, "2025-03-10"), checkin(2, "2025-03-10")], 1)["completion_rate"] == 1.0


def test_category_stats_average_only_counts_moods():
    stats = category_stats(
        [checkin(1, "2025-03-10", 4), checkin(1, "2025-03-11", None), checkin(2, "2025-03-11", 3)],
        CATEGORIES
    )
    assert stats["Physical"]["count"] == 2
    assert stats["Physical"]["total_mood"] == 4
    assert stats["Physical"]["average_mood"] == 4.0
    assert stats["Mental"]["color"] == "#9B8AE6"


def test_weekly_buckets_use_iso_weeks():
    weeks = weekly_buckets([
        checkin(1, "2024-12-30", 5),
        checkin(1, "2025-03-10", 2),
        checkin(2, "2025-03-12", 4),
    ])
    assert list(weeks) == ["2025-W01", "2025-W11"]
    assert weeks["2025-W11"]["count"] == 2
    assert weeks["2025-W11"]["average_mood"] == 3.0


def test_best_and_worst_days():
    days = [
        {"date": "2025-03-01", "completion_rate": 0.5},
        {"date": "2025-03-02", "completion_rate": 1.0},
        {"date": "2025-03-03", "completion_rate": 0.17},
    ]
    best, worst = best_and_worst_days(days, limit=2)
    assert [d["date"] for d in best] == ["2025-03-02", "2025-03-01"]
    assert [d["date"] for d in worst] == ["2025-03-03", "2025-03-01"]


def test_mood_trend():
    trend = mood_trend([{"date": "2025-03-01", "total_mood": 9, "categories_completed": 2}])
    assert trend == [{"date": "2025-03-01", "average_mood": 4.5}]


def test_streak_analysis():
    analysis = streak_analysis([
        {"category_id": 1, "current_streak": 3, "longest_streak": 10},
        {"category_id": 2, "current_streak": 0, "longest_streak": 4},
    ], CATEGORIES)
    assert analysis["total_current_streak"] == 3
    assert analysis["longest_streak_ever"] == 10
    assert analysis["active_streaks"] == 1
    assert analysis["current_streaks"][0]["category"] == "Physical"

    assert streak_analysis([], CATEGORIES)["longest_streak_ever"] == 0


def test_weekly_stats_perfect_days():
    rows = [checkin(cid, "2025-03-10") for cid in range(1, 7)] + [checkin(1, "2025-03-11")]
    stats = weekly_stats(rows, range(1, 7))
    assert stats["total_checkins"] == 7
    assert stats["perfect_days"] == 1
    assert stats["completion_rate"] == pytest.approx(16.67)


def test_weekly_rate_ignores_personal_categories():
    week = [(date(2025, 3, 10) + timedelta(days=n)).isoformat() for n in range(7)]
    rows = [checkin(cid, day) for cid in range(1, 7) for day in week]
    rows += [checkin(cid, day) for cid in (41, 42) for day in week]

    stats = weekly_stats(rows, range(1, 7))
    assert stats["total_checkins"] == 56
    assert stats["perfect_days"] == 7
    assert stats["completion_rate"] == 100.0

    personal_only = weekly_stats([checkin(41, day) for day in week], range(1, 7))
    assert personal_only["completion_rate"] == 0.0


def test_json_export_summary():
    data = build_json_export(
        [checkin(1, "2025-03-02", 4), checkin(2, "2025-03-01", 3)],
        [{"category_id": 1, "longest_streak": 6}],
        profile={"name": "Ana"}
    )
    assert data["summary"] == {
        "total_checkins": 2,
        "earliest_date": "2025-03-01",
        "latest_date": "2025-03-02",
        "longest_streak": 6,
    }
    assert data["profile"] == {"name": "Ana"}
    assert "profile" not in build_json_export([], [])


def test_csv_export_rows():
    content = build_csv_export(
        [checkin(2, "2025-03-02", None, "tired, but ok"), checkin(1, "2025-03-01", 5)],
        CATEGORIES
    )
    rows = list(csv.reader(io.StringIO(content)))
    assert rows[0] == CSV_COLUMNS
    assert rows[1] == ["2025-03-01", "Physical", "5", ""]
    assert rows[2] == ["2025-03-02", "Mental", "", "tired, but ok"]


def test_csv_export_without_checkins_has_header_only():
    assert build_csv_export([], CATEGORIES).strip() == ",".join(CSV_COLUMNS)


def test_analytics_endpoint(client, fake_db, category_ids):
    service = AnalyticsService(fake_db)
    for offset, slugs in [(0, ["physical", "mental"]), (1, ["physical"]), (40, ["social"])]:
        day = FIXED_TODAY - timedelta(days=offset)
        for slug in slugs:
            add_checkin(fake_db, category_ids[slug], day, mood=4)
        service.refresh_daily_stats(USER_ID, day)

    response = client.get("/api/v1/analytics", params={"period": 7})
    assert response.status_code == 200
    data = response.json()
    overview = data["overview"]
    assert overview["period"] == "7 days"
    assert overview["total_checkins"] == 3
    assert overview["days_with_data"] == 2
    assert overview["data_completeness"] == 29
    assert data["category_stats"]["Physical"]["count"] == 2
    assert [d["date"] for d in data["mood_trend"]] == [
        (FIXED_TODAY - timedelta(days=1)).isoformat(), FIXED_TODAY.isoformat()
    ]
    assert data["best_days"][0]["date"] == FIXED_TODAY.isoformat()


def test_analytics_category_filter(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["physical"], FIXED_TODAY)
    add_checkin(fake_db, category_ids["mental"], FIXED_TODAY)

    response = client.get("/api/v1/analytics", params={"category_id": category_ids["mental"]})
    assert response.status_code == 200
    assert list(response.json()["category_stats"]) == ["Mental"]


def test_analytics_rejects_bad_period(client):
    assert client.get("/api/v1/analytics", params={"period": 0}).status_code == 400
    assert client.get("/api/v1/analytics", params={"period": 1000}).status_code == 400


def test_export_json_endpoint(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["physical"], date(2025, 3, 1), mood=3)

    response = client.post("/api/v1/analytics/export", json={"format": "json"})
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["total_checkins"] == 1
    assert data["profile"]["name"] == "Ana"

    without_profile = client.post("/api/v1/analytics/export", json={"include_profile": False}).json()
    assert "profile" not in without_profile


def test_export_csv_endpoint(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["spiritual"], date(2025, 3, 1), mood=2, notes="meditated")

    response = client.post("/api/v1/analytics/export", json={"format": "csv"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="axis6-data.csv"' in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[1] == ["2025-03-01", "Spiritual", "2", "meditated"]
