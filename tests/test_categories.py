from axis6.config.categories_config import AXIS_SLUGS, DEFAULT_CHAT_ROOMS, category_display_name
from axis6.modules.categories.service import CategoryService, slugify
from axis6.scripts.seed_categories import seed_categories, seed_chat_rooms
from tests.conftest import FIXED_TODAY, OTHER_USER_ID, USER_ID, FakeQuery, add_checkin


def test_seed_is_idempotent(fake_db):
    ids = seed_categories(fake_db)
    assert list(ids) == AXIS_SLUGS
    assert len(fake_db.rows("axis6_categories")) == 6

    assert seed_chat_rooms(fake_db, ids) == len(DEFAULT_CHAT_ROOMS)
    assert len(fake_db.rows("axis6_chat_rooms")) == len(DEFAULT_CHAT_ROOMS)


def test_category_display_name_fallbacks():
    assert category_display_name({"name": {"en": "Physical", "es": "Física"}}, "es") == "Física"
    assert category_display_name({"name": {"en": "Physical"}}, "fr") == "Physical"
    assert category_display_name({"slug": "piano", "name": {}}) == "piano"
    assert category_display_name(None) == "Unknown"


def test_slugify():
    assert slugify("Piano Practice!") == "piano-practice"
    assert slugify("  ") == ""


def test_list_categories_in_axis_order_with_today_status(client, fake_db, category_ids):
    add_checkin(fake_db, category_ids["social"], FIXED_TODAY, mood=3)

    response = client.get("/api/v1/categories")
    assert response.status_code == 200
    data = response.json()
    assert [c["slug"] for c in data] == AXIS_SLUGS
    social = next(c for c in data if c["slug"] == "social")
    assert social["completed"] is True
    assert social["today_checkin"]["mood"] == 3
    assert not any(c["completed"] for c in data if c["slug"] != "social")


def test_create_personal_category(client, fake_db):
    response = client.post("/api/v1/categories", json={"name": "Piano", "color": "#112233"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == {"en": "Piano"}
    assert data["slug"].startswith("piano-")
    assert data["position"] == 999
    assert data["is_default"] is False

    duplicate = client.post("/api/v1/categories", json={"name": "Piano"})
    assert duplicate.status_code == 400


def test_create_category_validation(client):
    assert client.post("/api/v1/categories", json={"name": "Piano", "color": "red"}).status_code == 422
    assert client.post("/api/v1/categories", json={"name": {"es": "Piano"}}).status_code == 422


def test_personal_categories_are_private(client, fake_db):
    fake_db.add_row("axis6_categories", {
        "slug": "golf-22222222", "name": {"en": "Golf"}, "color": "#6366f1",
        "icon": "circle", "position": 999, "created_by": OTHER_USER_ID
    })
    slugs = [c["slug"] for c in client.get("/api/v1/categories").json()]
    assert "golf-22222222" not in slugs


def test_category_lookup_reads_only_visible_rows(fake_db, category_ids, monkeypatch):
    fake_db.add_row("axis6_categories", {
        "slug": "golf-22222222", "name": {"en": "Golf"}, "color": "#6366f1",
        "icon": "circle", "position": 999, "created_by": OTHER_USER_ID
    })
    fetched = []
    plain_execute = FakeQuery.execute

    def recording_execute(query):
        response = plain_execute(query)
        if query.table_name == "axis6_categories":
            fetched.extend(response.data)
        return response

    monkeypatch.setattr(FakeQuery, "execute", recording_execute)
    service = CategoryService(fake_db)

    assert len(service.get_category_map(USER_ID)) == 6
    assert service.count_active(USER_ID) == 6
    assert fetched
    assert all(row.get("created_by") in (None, USER_ID) for row in fetched)


def test_default_categories_are_read_only(client, category_ids):
    response = client.put(f"/api/v1/categories/{category_ids['physical']}", json={"color": "#000000"})
    assert response.status_code == 403
    assert client.delete(f"/api/v1/categories/{category_ids['physical']}").status_code == 403


def test_update_and_deactivate_personal_category(client):
    created = client.post("/api/v1/categories", json={"name": "Piano"}).json()

    response = client.put(f"/api/v1/categories/{created['id']}", json={"icon": "music", "is_active": False})
    assert response.status_code == 200
    assert response.json()["icon"] == "music"

    active = [c["slug"] for c in client.get("/api/v1/categories").json()]
    assert created["slug"] not in active
    everything = [c["slug"] for c in client.get("/api/v1/categories", params={"include_inactive": True}).json()]
    assert created["slug"] in everything


def test_delete_category_with_checkins_is_refused(client, fake_db):
    created = client.post("/api/v1/categories", json={"name": "Piano"}).json()
    add_checkin(fake_db, created["id"], FIXED_TODAY)

    assert client.delete(f"/api/v1/categories/{created['id']}").status_code == 400

    fake_db.tables["axis6_checkins"] = []
    assert client.delete(f"/api/v1/categories/{created['id']}").status_code == 204
