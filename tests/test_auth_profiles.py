from datetime import timedelta

import pytest

from axis6.core.dependencies import get_current_user_id
from axis6.main import app
from tests.conftest import FIXED_TODAY, add_checkin

NEW_USER = {"email": "new.user@axis6.app", "password": "s3cure-pass", "name": "Nuevo", "timezone": "Europe/Madrid"}


@pytest.fixture
def anonymous_client(client):
    app.dependency_overrides.pop(get_current_user_id, None)
    return client


def test_register_creates_profile(anonymous_client, fake_db):
    response = anonymous_client.post("/api/v1/auth/register", json=NEW_USER)
    assert response.status_code == 201
    user_id = response.json()["user_id"]

    profile = next(p for p in fake_db.rows("axis6_profiles") if p["id"] == user_id)
    assert profile["name"] == "Nuevo"
    assert profile["timezone"] == "Europe/Madrid"
    assert profile["onboarded"] is False


def test_register_twice_is_rejected(anonymous_client):
    anonymous_client.post("/api/v1/auth/register", json=NEW_USER)
    assert anonymous_client.post("/api/v1/auth/register", json=NEW_USER).status_code == 400


def test_register_validates_password_and_email(anonymous_client):
    assert anonymous_client.post("/api/v1/auth/register", json={**NEW_USER, "password": "short"}).status_code == 422
    assert anonymous_client.post("/api/v1/auth/register", json={**NEW_USER, "email": "nope"}).status_code == 422


def test_login_and_me(anonymous_client):
    anonymous_client.post("/api/v1/auth/register", json=NEW_USER)

    bad = anonymous_client.post("/api/v1/auth/login", json={"email": NEW_USER["email"], "password": "wrong"})
    assert bad.status_code == 401

    login = anonymous_client.post(
        "/api/v1/auth/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = anonymous_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == NEW_USER["email"]
    assert me.json()["profile"]["name"] == "Nuevo"

    logout = anonymous_client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert logout.status_code == 200


def test_requests_without_valid_token_are_rejected(anonymous_client):
    assert anonymous_client.get("/api/v1/dashboard").status_code in (401, 403)
    response = anonymous_client.get("/api/v1/dashboard", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_get_profile(client):
    response = client.get("/api/v1/profiles/me")
    assert response.status_code == 200
    assert response.json()["name"] == "Ana"
    assert response.json()["timezone"] == "UTC"


def test_profile_is_created_on_first_access(client, fake_db, current_user):
    current_user["id"] = "44444444-4444-4444-4444-444444444444"
    current_user["email"] = "carla@axis6.app"

    response = client.get("/api/v1/profiles/me")
    assert response.status_code == 200
    assert response.json()["name"] == "carla"
    assert response.json()["onboarded"] is False


def test_update_profile(client):
    response = client.put("/api/v1/profiles/me", json={"name": "  Ana María ", "timezone": "America/Santo_Domingo"})
    assert response.status_code == 200
    assert response.json()["name"] == "Ana María"
    assert response.json()["timezone"] == "America/Santo_Domingo"

    assert client.put("/api/v1/profiles/me", json={"timezone": "Mars/Olympus"}).status_code == 422


def test_complete_onboarding(client, fake_db):
    fake_db.rows("axis6_profiles")[0]["onboarded"] = False
    response = client.post("/api/v1/profiles/me/onboarding")
    assert response.status_code == 200
    assert response.json()["onboarded"] is True


def test_dashboard(client, fake_db, category_ids):
    for slug in ["physical", "mental", "emotional", "social", "spiritual", "material"]:
        client.post("/api/v1/checkins/toggle", json={"category_id": category_ids[slug], "mood": 4})
    add_checkin(fake_db, category_ids["physical"], FIXED_TODAY - timedelta(days=1))
    add_checkin(fake_db, category_ids["physical"], FIXED_TODAY - timedelta(days=10))

    response = client.get("/api/v1/dashboard")
    assert response.status_code == 200
    data = response.json()
    assert data["date"] == FIXED_TODAY.isoformat()
    assert data["profile"]["name"] == "Ana"
    assert len(data["categories"]) == 6
    assert all(c["today_completed"] for c in data["categories"])
    assert data["today_stats"]["categories_completed"] == 6
    assert data["today_stats"]["completion_rate"] == 1.0
    assert data["weekly_stats"]["total_checkins"] == 7
    assert data["weekly_stats"]["perfect_days"] == 1
    assert data["weekly_stats"]["completion_rate"] == pytest.approx(16.67)


def test_dashboard_for_new_user_is_empty(client):
    data = client.get("/api/v1/dashboard").json()
    assert not any(c["today_completed"] for c in data["categories"])
    assert all(c["current_streak"] == 0 for c in data["categories"])
    assert data["today_stats"] is None
    assert data["weekly_stats"] == {"total_checkins": 0, "perfect_days": 0, "completion_rate": 0.0}
