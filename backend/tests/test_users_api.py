from notekeeper.utils.jwt_auth import TokenService

from conftest import ADMIN_EMAIL, PASSWORD


def test_register_login_token_returned(client, settings):
    r = client.post("/user/register", json={"name": "Ann", "email": "ann@x.com", "password": "secret"})
    assert r.status_code == 201
    user_id = r.json()["user"]["id"]
    assert "password" not in r.json()["user"]
    assert "hashed_password" not in r.json()["user"]

    r = client.post("/user/login", json={"email": "ann@x.com", "password": "secret"})
    assert r.status_code == 200
    data = r.json()
    assert data["token_type"] == "bearer"
    assert data["user"] == {"id": user_id, "name": "Ann", "email": "ann@x.com", "role": "user"}

    # the token decodes back to the registered user
    claims = TokenService(settings.jwt_secret).verify(data["token"])
    assert claims.user_id == user_id


def test_email_is_case_insensitive_and_unique(client):
    r = client.post("/user/register", json={"name": "Ann", "email": "Ann@X.com", "password": PASSWORD})
    assert r.status_code == 201
    assert r.json()["user"]["email"] == "ann@x.com"

    r = client.post("/user/register", json={"name": "Ann 2", "email": "ann@x.com", "password": PASSWORD})
    assert r.status_code == 409
    assert r.json() == {"message": "Email already registered"}

    r = client.post("/user/login", json={"email": "ANN@x.com", "password": PASSWORD})
    assert r.status_code == 200


def test_register_requires_all_fields(client):
    r = client.post("/user/register", json={"name": "Ann", "email": "ann@x.com"})
    assert r.status_code == 400
    assert r.json() == {"message": "Name, email and password are required"}


def test_login_wrong_password(client):
    client.post("/user/register", json={"name": "Ann", "email": "ann@x.com", "password": PASSWORD})
    r = client.post("/user/login", json={"email": "ann@x.com", "password": "wrongwrongwrong"})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid email or password"}


def test_login_unknown_email_looks_like_wrong_password(client):
    r = client.post("/user/login", json={"email": "nobody@x.com", "password": PASSWORD})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid email or password"}


def test_login_missing_fields(client):
    r = client.post("/user/login", json={"email": "ann@x.com"})
    assert r.status_code == 400
    assert r.json() == {"message": "Email and password are required"}


def test_malformed_json_body_is_a_400(client):
    r = client.post(
        "/user/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert "message" in r.json()


def test_profile_hides_password(client, auth_headers):
    headers = auth_headers("ann@x.com", name="Ann")
    r = client.get("/user/profile", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == "ann@x.com"
    assert body["name"] == "Ann"
    assert body["role"] == "user"
    assert "hashed_password" not in body
    assert "password" not in body


def test_profile_requires_token(client):
    r = client.get("/user/profile")
    assert r.status_code == 401
    assert r.json() == {"message": "No token provided"}


def test_configured_admin_email_registers_as_admin(client, auth_headers):
    headers = auth_headers(ADMIN_EMAIL)
    r = client.get("/user/profile", headers=headers)
    assert r.json()["role"] == "admin"


def test_register_ignores_requested_role(client):
    r = client.post(
        "/user/register",
        json={"name": "Eve", "email": "eve@x.com", "password": PASSWORD, "role": "admin"},
    )
    assert r.status_code == 201
    assert r.json()["user"]["role"] == "user"


def test_user_listing_is_admin_only(client, auth_headers):
    user_headers = auth_headers("ann@x.com")
    admin_headers = auth_headers(ADMIN_EMAIL)

    r = client.get("/user", headers=user_headers)
    assert r.status_code == 403
    assert r.json() == {"message": "Access denied. Required role: admin"}

    r = client.get("/user", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert {u["email"] for u in body["users"]} == {"ann@x.com", ADMIN_EMAIL}
    assert all("hashed_password" not in u for u in body["users"])

    r = client.get("/user")
    assert r.status_code == 401


def test_health_checks(client):
    assert client.get("/health").json() == {"ok": True}
    r = client.get("/user/health-check")
    assert r.status_code == 200
    assert r.text == "OK"
    r = client.get("/note/health-check")
    assert r.status_code == 200
    assert r.text == "Note Route OK"
