import pytest
from fastapi.testclient import TestClient

from notekeeper.config import Settings
from notekeeper.main import create_app

ADMIN_EMAIL = "admin@x.com"
PASSWORD = "StrongPassw0rd!"


@pytest.fixture()
def settings(tmp_path):
    # isolate data dir per test; minimum bcrypt cost keeps the suite fast
    return Settings(
        jwt_secret="dev-secret-for-tests",
        bcrypt_rounds=4,
        data_dir=tmp_path,
        admin_emails=frozenset({ADMIN_EMAIL}),
    )


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
def auth_headers(client):
    """Register (once) and log in a user, returning Authorization headers."""

    def _login(email: str, name: str = "Someone", password: str = PASSWORD) -> dict:
        r = client.post("/user/register", json={"name": name, "email": email, "password": password})
        assert r.status_code in (201, 409)
        r = client.post("/user/login", json={"email": email, "password": password})
        assert r.status_code == 200
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login
