import asyncio
from datetime import date, datetime, timedelta, timezone

from axis6.modules.streaks import streak_scheduler
from axis6.modules.streaks.calculator import calculate_streak, is_streak_alive
from axis6.modules.streaks.service import StreakService
from tests.conftest import FIXED_TODAY, OTHER_USER_ID, USER_ID, add_checkin

TODAY = date(2025, 3, 12)


def days_ago(*offsets):
    return [TODAY - timedelta(days=n) for n in offsets]


def test_no_checkins_means_no_streak():
    assert calculate_streak([], TODAY) is None


def test_streak_ending_today_is_current():
    stats = calculate_streak(days_ago(0, 1, 2), TODAY)
    assert stats.current_streak == 3
    assert stats.longest_streak == 3
    assert stats.last_checkin == TODAY


def test_streak_ending_yesterday_stays_alive():
    stats = calculate_streak(days_ago(1, 2), TODAY)
    assert stats.current_streak == 2


def test_gap_of_two_days_breaks_current_streak():
    stats = calculate_streak(days_ago(2, 3, 4, 5), TODAY)
    assert stats.current_streak == 0
    assert stats.longest_streak == 4
    assert stats.last_checkin == TODAY - timedelta(days=2)


def test_longest_run_is_kept_after_a_break():
    stats = calculate_streak(days_ago(0, 1, 5, 6, 7, 8), TODAY)
    assert stats.current_streak == 2
    assert stats.longest_streak == 4


def test_duplicate_and_unordered_dates_are_ignored():
    stats = calculate_streak([TODAY, TODAY - timedelta(days=1), TODAY], TODAY)
    assert stats.current_streak == 2
    assert stats.longest_streak == 2


def test_streak_across_month_boundary():
    stats = calculate_streak([date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1)], date(2025, 3, 1))
    assert stats.current_streak == 3


def test_is_streak_alive():
    assert is_streak_alive(TODAY, TODAY)
    assert is_streak_alive(TODAY - timedelta(days=1), TODAY)
    assert not is_streak_alive(TODAY - timedelta(days=2), TODAY)
    assert not is_streak_alive(None, TODAY)


def test_recalculate_writes_and_removes_streak_row(fake_db, category_ids):
    service = StreakService(fake_db)
    physical = category_ids["physical"]
    add_checkin(fake_db, physical, TODAY)
    add_checkin(fake_db, physical, TODAY - timedelta(days=1))

    row = service.recalculate(USER_ID, physical, TODAY)
    assert row["current_streak"] == 2
    assert row["longest_streak"] == 2
    assert len(fake_db.rows("axis6_streaks")) == 1

    fake_db.tables["axis6_checkins"] = []
    assert service.recalculate(USER_ID, physical, TODAY) is None
    assert fake_db.rows("axis6_streaks") == []


def test_reset_stale_streaks_only_touches_lapsed_rows(fake_db, category_ids):
    physical = category_ids["physical"]
    mental = category_ids["mental"]
    fake_db.add_row("axis6_streaks", {
        "user_id": USER_ID, "category_id": physical,
        "current_streak": 4, "longest_streak": 4, "last_checkin": "2025-03-11"
    })
    fake_db.add_row("axis6_streaks", {
        "user_id": USER_ID, "category_id": mental,
        "current_streak": 3, "longest_streak": 5, "last_checkin": "2025-03-08"
    })

    now = datetime(2025, 3, 12, 15, 0, tzinfo=timezone.utc)
    assert StreakService(fake_db).reset_stale_streaks(now=now) == 1

    by_category = {r["category_id"]: r for r in fake_db.rows("axis6_streaks")}
    assert by_category[physical]["current_streak"] == 4
    assert by_category[mental]["current_streak"] == 0
    assert by_category[mental]["longest_streak"] == 5


def test_reset_stale_streaks_uses_owner_timezone(fake_db, category_ids):
    # 02:00 UTC on the 13th is still the 12th in Santo Domingo (UTC-4)
    fake_db.tables["axis6_profiles"][1]["timezone"] = "America/Santo_Domingo"
    fake_db.add_row("axis6_streaks", {
        "user_id": OTHER_USER_ID, "category_id": category_ids["social"],
        "current_streak": 2, "longest_streak": 2, "last_checkin": "2025-03-11"
    })
    now = datetime(2025, 3, 13, 2, 0, tzinfo=timezone.utc)
    assert StreakService(fake_db).reset_stale_streaks(now=now) == 0


def test_list_streaks_endpoint(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["mental"], FIXED_TODAY)
    StreakService(fake_db).recalculate(USER_ID, category_ids["mental"], FIXED_TODAY)

    response = client.get("/api/v1/streaks")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["current_streak"] == 1
    assert data[0]["category"]["slug"] == "mental"


def test_recalculate_endpoint_rebuilds_from_checkins(client, fake_db, category_ids):
    for offset in range(3):
        add_checkin(fake_db, category_ids["physical"], FIXED_TODAY - timedelta(days=offset))
    add_checkin(fake_db, category_ids["spiritual"], FIXED_TODAY - timedelta(days=5))

    response = client.post("/api/v1/streaks/recalculate")
    assert response.status_code == 200
    data = response.json()
    assert data["recalculated"] == 2
    by_slug = {s["category"]["slug"]: s for s in data["streaks"]}
    assert by_slug["physical"]["current_streak"] == 3
    assert by_slug["spiritual"]["current_streak"] == 0
    assert by_slug["spiritual"]["longest_streak"] == 1


def test_scheduler_pass_resets_lapsed_streaks(fake_db, category_ids, monkeypatch):
    fake_db.add_row("axis6_streaks", {
        "user_id": USER_ID, "category_id": category_ids["material"],
        "current_streak": 9, "longest_streak": 9, "last_checkin": "2020-01-01"
    })
    monkeypatch.setattr(streak_scheduler, "get_supabase", lambda: fake_db)

    asyncio.run(streak_scheduler.reset_stale_streaks())
    assert fake_db.rows("axis6_streaks")[0]["current_streak"] == 0
