import pytest
from sqlmodel import Session, select

from authsvc.models.refresh_token import RefreshToken
from authsvc.models.user import User


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client, make_user):
    make_user("root", "correct-password", role="admin")
    res = client.post("/auth/login", json={"username": "root", "password": "correct-password"})
    return _bearer(res.json()["accessToken"])


def test_users_endpoints_require_bearer(client, db_engine):
    assert client.get("/users/me").status_code == 401
    assert client.post("/users", json={}).status_code == 401


def test_invalid_bearer_is_rejected(client, db_engine):
    res = client.get("/users/me", headers=_bearer("not-a-jwt"))

    assert res.status_code == 401


def test_me_returns_current_user(client, admin_headers):
    res = client.get("/users/me", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["username"] == "root"
    assert "password_hash" not in res.json()


def test_create_then_login(client, admin_headers):
    res = client.post(
        "/users",
        headers=admin_headers,
        json={"username": "bob", "password": "bob-password", "email": "bob@example.com"},
    )

    assert res.status_code == 201
    assert res.json()["role"] == "user"
    assert "password" not in res.json()

    login = client.post("/auth/login", json={"username": "bob", "password": "bob-password"})
    assert login.status_code == 200


def test_create_duplicate_username(client, admin_headers):
    payload = {"username": "bob", "password": "bob-password"}
    assert client.post("/users", headers=admin_headers, json=payload).status_code == 201

    res = client.post("/users", headers=admin_headers, json=payload)

    assert res.status_code == 409


def test_create_rejects_short_password(client, admin_headers):
    res = client.post("/users", headers=admin_headers, json={"username": "bob", "password": "short"})

    assert res.status_code == 422


def test_get_unknown_user(client, admin_headers):
    res = client.get("/users/nope", headers=admin_headers)

    assert res.status_code == 404


def test_update_password(client, admin_headers, make_user):
    bob = make_user("bob", "old-password")

    res = client.patch(
        f"/users/{bob.id}", headers=admin_headers, json={"password": "new-password", "first_name": "Bob"}
    )

    assert res.status_code == 200
    assert res.json()["first_name"] == "Bob"
    old = client.post("/auth/login", json={"username": "bob", "password": "old-password"})
    new = client.post("/auth/login", json={"username": "bob", "password": "new-password"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_delete_removes_refresh_records(client, admin_headers, make_user, db_engine):
    bob = make_user("bob", "bob-password")
    client.post("/auth/login", json={"username": "bob", "password": "bob-password"})

    res = client.delete(f"/users/{bob.id}", headers=admin_headers)

    assert res.status_code == 204
    with Session(db_engine) as s:
        assert s.get(User, bob.id) is None
        rows = s.exec(select(RefreshToken).where(RefreshToken.user_id == bob.id)).all()
    assert rows == []


@pytest.mark.parametrize("field", ["username", "role", "password"])
def test_update_rejects_null_for_required_field(client, admin_headers, make_user, db_engine, field):
    bob = make_user("bob", "bob-password")

    res = client.patch(f"/users/{bob.id}", headers=admin_headers, json={field: None})

    assert res.status_code == 422
    assert res.json()["statusCode"] == 422
    with Session(db_engine) as s:
        stored = s.get(User, bob.id)
    assert stored.username == "bob"
    assert stored.role == "user"


def test_update_can_clear_optional_field(client, admin_headers, make_user):
    bob = make_user("bob", "bob-password")
    client.patch(f"/users/{bob.id}", headers=admin_headers, json={"email": "bob@example.com"})

    res = client.patch(f"/users/{bob.id}", headers=admin_headers, json={"email": None})

    assert res.status_code == 200
    assert res.json()["email"] is None
