from datetime import timedelta

from jose import jwt
from sqlalchemy import delete
from sqlmodel import Session, select

from authsvc.core.tokens import TokenSigner, utcnow
from authsvc.models.refresh_token import RefreshToken
from authsvc.repositories.auth_repository import AuthRepository

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def _claims(token, secret):
    return jwt.decode(token, secret, algorithms=["HS256"])


def _login(client, username="alice", password="correct-password"):
    return client.post("/auth/login", json={"username": username, "password": password})


def test_login_success(client, make_user):
    alice = make_user("alice", "correct-password", role="admin")

    res = _login(client)

    assert res.status_code == 200
    body = res.json()
    assert set(body) == {"user", "accessToken", "refreshToken"}
    assert body["user"]["id"] == alice.id
    assert body["user"]["username"] == "alice"
    assert "password_hash" not in body["user"]
    assert _claims(body["accessToken"], ACCESS_SECRET)["role"] == "admin"


def test_login_failures_look_the_same(client, make_user):
    make_user("alice", "correct-password")

    wrong_password = _login(client, password="wrong")
    unknown_user = _login(client, username="bob", password="x")

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["error"] == "Unauthorized"
    assert wrong_password.headers["www-authenticate"] == "Bearer"


def test_login_requires_both_fields(client, db_engine):
    res = client.post("/auth/login", json={"username": "alice"})

    assert res.status_code == 422
    assert res.json()["statusCode"] == 422


def test_refresh_rotates_and_keeps_old_record(client, make_user, db_engine):
    make_user("alice", "correct-password")
    first = _login(client).json()

    res = client.post("/auth/refresh", headers=_bearer(first["refreshToken"]))

    assert res.status_code == 200
    second = res.json()
    assert set(second) == {"accessToken", "refreshToken"}
    old_jti = _claims(first["refreshToken"], REFRESH_SECRET)["jti"]
    new_jti = _claims(second["refreshToken"], REFRESH_SECRET)["jti"]
    assert old_jti != new_jti

    with Session(db_engine) as s:
        jtis = {r.jti for r in s.exec(select(RefreshToken)).all()}
    assert jtis == {old_jti, new_jti}


def test_refresh_without_token(client, db_engine):
    res = client.post("/auth/refresh")

    assert res.status_code == 401


def test_refresh_rejects_access_token(client, make_user):
    make_user("alice", "correct-password")
    tokens = _login(client).json()

    res = client.post("/auth/refresh", headers=_bearer(tokens["accessToken"]))

    assert res.status_code == 401


def test_refresh_rejects_deleted_record(client, make_user, db_engine):
    make_user("alice", "correct-password")
    tokens = _login(client).json()
    with Session(db_engine) as s:
        s.exec(delete(RefreshToken))
        s.commit()

    res = client.post("/auth/refresh", headers=_bearer(tokens["refreshToken"]))

    assert res.status_code == 401


def test_refresh_rejects_expired_token(client, make_user):
    alice = make_user("alice", "correct-password")
    expired = TokenSigner().sign(
        {"sub": alice.id, "role": "user", "jti": "old"},
        REFRESH_SECRET,
        60,
        issued_at=utcnow() - timedelta(hours=1),
    )

    res = client.post("/auth/refresh", headers=_bearer(expired))

    assert res.status_code == 401


def test_refresh_for_deleted_user(client, make_user, session):
    alice = make_user("alice", "correct-password")
    tokens = _login(client).json()
    session.delete(alice)
    session.commit()

    res = client.post("/auth/refresh", headers=_bearer(tokens["refreshToken"]))

    assert res.status_code == 404
    assert res.json()["error"] == "Not Found"


def test_refresh_record_lookup_failure_is_internal(client, make_user, db_engine, monkeypatch):
    make_user("alice", "correct-password")
    tokens = _login(client).json()

    def broken_lookup(self, jti):
        raise RuntimeError("connection reset: password=hunter2")

    monkeypatch.setattr(AuthRepository, "find_refresh_token", broken_lookup)

    res = client.post("/auth/refresh", headers=_bearer(tokens["refreshToken"]))

    assert res.status_code == 500
    assert res.json()["error"] == "Internal Server Error"
    assert "hunter2" not in res.text
    with Session(db_engine) as s:
        assert len(s.exec(select(RefreshToken)).all()) == 1
