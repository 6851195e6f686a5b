"""
Shared fixtures: an in-memory stand-in for the Supabase query builder and a
TestClient wired to it with a fixed "today" and a fixed authenticated user.
"""

import re
import uuid
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from axis6.core.dependencies import get_current_user_id
from axis6.core.rate_limit import limiter
from axis6.database.supabase_client import get_auth_client, get_supabase
from axis6.main import app
from axis6.modules.auth.service import clear_auth_cache
from axis6.scripts.seed_categories import seed_categories, seed_chat_rooms

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"
THIRD_USER_ID = "33333333-3333-3333-3333-333333333333"
FIXED_TODAY = date(2025, 3, 12)

UUID_TABLES = {
    "axis6_chat_rooms",
    "axis6_chat_participants",
    "axis6_chat_messages",
    "axis6_chat_reactions",
    "axis6_user_preferences",
    "axis6_notification_preferences",
    "axis6_privacy_settings",
    "axis6_wellness_preferences",
    "axis6_micro_wins",
    "axis6_micro_reactions",
    "axis6_resonance_streaks",
    "axis6_social_graph",
    "axis6_daily_rituals",
}
NO_ID_TABLES = {"axis6_daily_stats"}

TABLE_DEFAULTS = {
    "axis6_chat_rooms": {"is_active": True, "max_participants": None, "metadata": {}, "created_by": None},
    "axis6_chat_participants": {
        "role": "member",
        "is_muted": False,
        "notification_settings": {"mentions": True, "all": True},
    },
    "axis6_chat_messages": {
        "message_type": "text",
        "reply_to_id": None,
        "metadata": {},
        "edited_at": None,
        "deleted_at": None,
    },
    "axis6_activity_logs": {"ended_at": None, "duration_minutes": None, "time_block_id": None, "notes": None},
    "axis6_categories": {"is_active": True, "is_default": False, "created_by": None, "description": None},
    "axis6_checkins": {"mood": None, "notes": None},
    "axis6_micro_wins": {"minutes": None, "resonance_count": 0, "is_morning_ritual": False, "deleted_at": None},
}

TIMESTAMP_COLUMNS = {
    "axis6_chat_participants": ["joined_at", "last_seen"],
    "axis6_chat_rooms": ["created_at", "updated_at"],
}


def _normalize(value):
    if isinstance(value, (date, datetime)):
        value = value.isoformat()
    if isinstance(value, str) and len(value) >= 19 and value[10] == "T":
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            return value
    return value


def _like_to_regex(pattern: str):
    parts = []
    escaped = False
    for char in pattern:
        if escaped:
            parts.append(re.escape(char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _split_top_level(text: str):
    parts, depth, current = [], 0, ""
    for char in text:
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        depth += {"(": 1, ")": -1}.get(char, 0)
        current += char
    if current:
        parts.append(current)
    return parts


def _postgrest_condition(condition: str):
    if condition.startswith("and(") and condition.endswith(")"):
        inner = [_postgrest_condition(part) for part in _split_top_level(condition[4:-1])]
        return lambda row: all(check(row) for check in inner)
    column, op, value = condition.split(".", 2)
    if op == "is" and value == "null":
        return lambda row: row.get(column) is None
    if op == "eq":
        return lambda row: row.get(column) is not None and str(row.get(column)) == value
    if op == "neq":
        return lambda row: str(row.get(column)) != value
    if op == "in":
        options = value.strip("()").split(",")
        return lambda row: str(row.get(column)) in options
    raise NotImplementedError(condition)


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.action = None
        self.columns = "*"
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.orders = []
        self.limit_count = None
        self.offset_count = 0

    # actions

    def select(self, columns="*", count=None):
        if self.action is None:
            self.action = "select"
            self.columns = columns
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def upsert(self, payload, on_conflict="", **kwargs):
        self.action, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    # filters

    def _compare(self, column, value, op):
        target = _normalize(value)

        def check(row):
            current = _normalize(row.get(column))
            if current is None or target is None:
                return False
            return op(current, target)
        self.filters.append(check)
        return self

    def eq(self, column, value):
        target = _normalize(value)
        self.filters.append(lambda row: _normalize(row.get(column)) == target)
        return self

    def neq(self, column, value):
        target = _normalize(value)
        self.filters.append(lambda row: _normalize(row.get(column)) != target)
        return self

    def gt(self, column, value):
        return self._compare(column, value, lambda a, b: a > b)

    def gte(self, column, value):
        return self._compare(column, value, lambda a, b: a >= b)

    def lt(self, column, value):
        return self._compare(column, value, lambda a, b: a < b)

    def lte(self, column, value):
        return self._compare(column, value, lambda a, b: a <= b)

    def in_(self, column, values):
        targets = [_normalize(v) for v in values]
        self.filters.append(lambda row: _normalize(row.get(column)) in targets)
        return self

    def is_(self, column, value):
        if value in (None, "null"):
            self.filters.append(lambda row: row.get(column) is None)
        else:
            self.filters.append(lambda row: row.get(column) is value)
        return self

    def or_(self, filters):
        """PostgREST `or` filter string: eq, neq, in, is.null and nested and(...) groups"""
        checks = [_postgrest_condition(part) for part in _split_top_level(filters)]
        self.filters.append(lambda row: any(check(row) for check in checks))
        return self

    def ilike(self, column, pattern):
        regex = _like_to_regex(pattern)
        self.filters.append(lambda row: row.get(column) is not None and bool(regex.fullmatch(str(row[column]))))
        return self

    def order(self, column, desc=False, **kwargs):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def offset(self, count):
        self.offset_count = count
        return self

    def range(self, start, end):
        self.offset_count = start
        self.limit_count = end - start + 1
        return self

    # execution

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def _project(self, row):
        if self.columns.strip() == "*":
            return dict(row)
        names = [c.strip() for c in self.columns.split(",") if c.strip()]
        return {name: row.get(name) for name in names}

    def execute(self):
        rows = self.db.tables.setdefault(self.table_name, [])

        if self.action == "select":
            selected = [r for r in rows if self._matches(r)]
            for column, desc in reversed(self.orders):
                present = [r for r in selected if r.get(column) is not None]
                missing = [r for r in selected if r.get(column) is None]
                present.sort(key=lambda r: _normalize(r.get(column)), reverse=desc)
                selected = present + missing
            selected = selected[self.offset_count:]
            if self.limit_count is not None:
                selected = selected[:self.limit_count]
            data = [self._project(r) for r in selected]
            return FakeResponse(data, count=len(data))

        if self.action == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            return FakeResponse([dict(self.db.add_row(self.table_name, row)) for row in payload])

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.action == "delete":
            deleted = [r for r in rows if self._matches(r)]
            self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
            return FakeResponse([dict(r) for r in deleted])

        if self.action == "upsert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in (self.on_conflict or "id").split(",") if k.strip()]
            result = []
            for item in payload:
                existing = next(
                    (r for r in rows if all(_normalize(r.get(k)) == _normalize(item.get(k)) for k in keys)),
                    None
                )
                if existing is not None:
                    existing.update(item)
                    result.append(dict(existing))
                else:
                    result.append(dict(self.db.add_row(self.table_name, item)))
            return FakeResponse(result)

        raise AssertionError(f"No action chosen for {self.table_name}")


class FakeAuth:
    """Minimal Supabase Auth: users keyed by email, tokens are 'token-<user id>'."""

    def __init__(self):
        self.users = {}
        self.signed_out = 0

    def _user(self, user_id, email):
        return SimpleNamespace(
            id=user_id, email=email, user_metadata={}, app_metadata={},
            created_at="2025-01-01T00:00:00+00:00", updated_at=None
        )

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.users:
            raise Exception("User already registered")
        user_id = str(uuid.uuid4())
        self.users[email] = (user_id, credentials["password"])
        return SimpleNamespace(user=self._user(user_id, email), session=None)

    def sign_in_with_password(self, credentials):
        email = credentials["email"]
        user_id, password = self.users.get(email, (None, None))
        if user_id is None or password != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(
            user=self._user(user_id, email),
            session=SimpleNamespace(access_token=f"token-{user_id}")
        )

    def get_user(self, jwt=None):
        for email, (user_id, _) in self.users.items():
            if jwt == f"token-{user_id}":
                return SimpleNamespace(user=self._user(user_id, email))
        raise Exception("invalid JWT")

    def sign_out(self):
        self.signed_out += 1


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.auth = FakeAuth()
        self._serial = {}
        self._clock = datetime(2025, 3, 12, 8, 0, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def add_row(self, table, values):
        row = dict(TABLE_DEFAULTS.get(table, {}))
        row.update(values)
        if "id" not in row and table not in NO_ID_TABLES:
            if table in UUID_TABLES:
                row["id"] = str(uuid.uuid4())
            else:
                self._serial[table] = self._serial.get(table, 0) + 1
                row["id"] = self._serial[table]
        stamp = self.tick()
        row.setdefault("created_at", stamp)
        for column in TIMESTAMP_COLUMNS.get(table, []):
            row.setdefault(column, stamp)
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table):
        return self.tables.get(table, [])


@pytest.fixture
def fake_db():
    db = FakeSupabase()
    category_ids = seed_categories(db)
    seed_chat_rooms(db, category_ids)
    for user_id, name in [(USER_ID, "Ana"), (OTHER_USER_ID, "Luis"), (THIRD_USER_ID, "Marta")]:
        db.add_row("axis6_profiles", {"id": user_id, "name": name, "timezone": "UTC", "onboarded": True})
    return db


@pytest.fixture
def category_ids(fake_db):
    return {c["slug"]: c["id"] for c in fake_db.rows("axis6_categories")}


@pytest.fixture
def current_user():
    return {"id": USER_ID, "email": "ana@example.com"}


@pytest.fixture
def client(fake_db, current_user, monkeypatch):
    monkeypatch.setattr(
        "axis6.modules.profiles.service.local_today",
        lambda timezone_name=None, now=None: FIXED_TODAY
    )
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_auth_client] = lambda: fake_db
    app.dependency_overrides[get_current_user_id] = lambda: current_user
    limiter.reset()
    clear_auth_cache()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def add_checkin(db, category_id, day, user_id=USER_ID, mood=4, notes=None):
    return db.add_row("axis6_checkins", {
        "user_id": user_id,
        "category_id": category_id,
        "completed_at": day.isoformat(),
        "mood": mood,
        "notes": notes,
    })
