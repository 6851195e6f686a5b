from axis6.database.supabase_client import get_supabase
from axis6.main import app


def test_root_and_health_endpoints(client):
    assert client.get("/").json() == {"message": "Welcome to axis6-backend", "status": "healthy"}
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/ready").json() == {"status": "ready"}


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_ready_reports_unavailable_database(client):
    class BrokenSupabase:
        def table(self, name):
            raise ConnectionError("database unreachable")

    app.dependency_overrides[get_supabase] = lambda: BrokenSupabase()
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}


def test_login_reports_onboarding_state(client, fake_db):
    client.post("/api/v1/auth/register", json={"email": "rosa@axis6.app", "password": "long-enough"})
    login = client.post("/api/v1/auth/login", json={"email": "rosa@axis6.app", "password": "long-enough"})
    assert login.status_code == 200
    assert login.json()["onboarded"] is False
    assert login.json()["token_type"] == "bearer"
