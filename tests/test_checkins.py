from datetime import timedelta

import pytest
from fastapi import HTTPException

from axis6.modules.checkins.service import validate_checkin_date
from tests.conftest import FIXED_TODAY, OTHER_USER_ID, USER_ID, add_checkin


def test_validate_checkin_date_rules():
    validate_checkin_date(FIXED_TODAY, FIXED_TODAY, 7)
    validate_checkin_date(FIXED_TODAY - timedelta(days=7), FIXED_TODAY, 7)

    with pytest.raises(HTTPException) as future:
        validate_checkin_date(FIXED_TODAY + timedelta(days=1), FIXED_TODAY, 7)
    assert future.value.status_code == 400

    with pytest.raises(HTTPException) as too_old:
        validate_checkin_date(FIXED_TODAY - timedelta(days=8), FIXED_TODAY, 7)
    assert too_old.value.status_code == 400


def test_toggle_creates_checkin_with_default_mood(client, fake_db, category_ids):
    response = client.post("/api/v1/checkins/toggle", json={"category_id": category_ids["physical"]})
    assert response.status_code == 200
    data = response.json()
    assert data["action"] == "added"
    assert data["date"] == FIXED_TODAY.isoformat()
    assert data["checkin"]["mood"] == 5
    assert data["checkin"]["category"]["slug"] == "physical"
    assert data["streak"]["current_streak"] == 1
    assert data["daily_stats"]["categories_completed"] == 1
    assert data["daily_stats"]["completion_rate"] == pytest.approx(0.17)

    rows = fake_db.rows("axis6_checkins")
    assert len(rows) == 1
    assert rows[0]["user_id"] == USER_ID


def test_toggle_twice_keeps_one_row_per_day(client, fake_db, category_ids):
    payload = {"category_id": category_ids["mental"], "mood": 3}
    client.post("/api/v1/checkins/toggle", json=payload)
    response = client.post("/api/v1/checkins/toggle", json={**payload, "mood": 4, "notes": "read a book"})
    assert response.status_code == 200

    rows = fake_db.rows("axis6_checkins")
    assert len(rows) == 1
    assert rows[0]["mood"] == 4
    assert rows[0]["notes"] == "read a book"


def test_uncheck_removes_checkin_streak_and_daily_stats(client, fake_db, category_ids):
    physical = category_ids["physical"]
    client.post("/api/v1/checkins/toggle", json={"category_id": physical})

    response = client.post("/api/v1/checkins/toggle", json={"category_id": physical, "completed": False})
    assert response.status_code == 200
    data = response.json()
    assert data["action"] == "removed"
    assert data["checkin"] is None
    assert data["streak"] is None
    assert data["daily_stats"] is None
    assert fake_db.rows("axis6_checkins") == []
    assert fake_db.rows("axis6_streaks") == []
    assert fake_db.rows("axis6_daily_stats") == []


def test_backfill_extends_streak(client, category_ids):
    physical = category_ids["physical"]
    for offset in (2, 1, 0):
        day = FIXED_TODAY - timedelta(days=offset)
        response = client.post(
            "/api/v1/checkins/toggle",
            json={"category_id": physical, "date": day.isoformat()}
        )
        assert response.status_code == 200
    assert response.json()["streak"]["current_streak"] == 3


def test_toggle_rejects_future_and_old_dates(client, category_ids):
    physical = category_ids["physical"]
    future = client.post(
        "/api/v1/checkins/toggle",
        json={"category_id": physical, "date": (FIXED_TODAY + timedelta(days=1)).isoformat()}
    )
    assert future.status_code == 400

    old = client.post(
        "/api/v1/checkins/toggle",
        json={"category_id": physical, "date": (FIXED_TODAY - timedelta(days=30)).isoformat()}
    )
    assert old.status_code == 400


def test_toggle_validates_mood_range(client, category_ids):
    response = client.post("/api/v1/checkins/toggle", json={"category_id": category_ids["physical"], "mood": 6})
    assert response.status_code == 422


def test_toggle_unknown_or_foreign_category(client, fake_db):
    assert client.post("/api/v1/checkins/toggle", json={"category_id": 999}).status_code == 404

    foreign = fake_db.add_row("axis6_categories", {
        "slug": "piano-22222222", "name": {"en": "Piano"}, "color": "#6366f1",
        "icon": "circle", "position": 999, "created_by": OTHER_USER_ID
    })
    response = client.post("/api/v1/checkins/toggle", json={"category_id": foreign["id"]})
    assert response.status_code == 404


def test_batch_toggle(client, fake_db, category_ids):
    response = client.post("/api/v1/checkins/batch", json={"checkins": [
        {"category_id": category_ids["physical"]},
        {"category_id": category_ids["social"], "mood": 2},
    ]})
    assert response.status_code == 200
    data = response.json()
    assert data["added"] == 2
    assert data["removed"] == 0
    assert len(fake_db.rows("axis6_checkins")) == 2

    stats = fake_db.rows("axis6_daily_stats")
    assert stats[0]["categories_completed"] == 2
    assert stats[0]["total_mood"] == 7


def test_batch_rejects_more_than_six(client, category_ids):
    checkins = [{"category_id": category_ids["physical"]}] * 7
    assert client.post("/api/v1/checkins/batch", json={"checkins": checkins}).status_code == 422
    assert client.post("/api/v1/checkins/batch", json={"checkins": []}).status_code == 422


def test_list_checkins_filters_by_date_and_owner(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["physical"], FIXED_TODAY)
    add_checkin(fake_db, category_ids["mental"], FIXED_TODAY - timedelta(days=1))
    add_checkin(fake_db, category_ids["physical"], FIXED_TODAY, user_id=OTHER_USER_ID)

    everything = client.get("/api/v1/checkins").json()
    assert [c["completed_at"] for c in everything] == [
        FIXED_TODAY.isoformat(), (FIXED_TODAY - timedelta(days=1)).isoformat()
    ]

    today_only = client.get("/api/v1/checkins", params={"date": FIXED_TODAY.isoformat()}).json()
    assert len(today_only) == 1
    assert today_only[0]["category"]["slug"] == "physical"


def test_update_checkin_mood_and_notes(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["emotional"], FIXED_TODAY, mood=2)

    response = client.put("/api/v1/checkins", json={
        "category_id": category_ids["emotional"], "mood": 5, "notes": "better now"
    })
    assert response.status_code == 200
    assert response.json()["mood"] == 5
    assert response.json()["notes"] == "better now"
    assert fake_db.rows("axis6_daily_stats")[0]["total_mood"] == 5


def test_update_missing_checkin_is_404(client, category_ids):
    response = client.put("/api/v1/checkins", json={"category_id": category_ids["emotional"], "mood": 3})
    assert response.status_code == 404


def test_delete_checkin(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["material"], FIXED_TODAY)

    response = client.delete("/api/v1/checkins", params={"category_id": category_ids["material"]})
    assert response.status_code == 204
    assert fake_db.rows("axis6_checkins") == []

    again = client.delete("/api/v1/checkins", params={"category_id": category_ids["material"]})
    assert again.status_code == 404
