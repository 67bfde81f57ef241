import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be set before anything under authsvc reads settings.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ.pop("BOOTSTRAP_ADMIN_USERNAME", None)
os.environ.pop("BOOTSTRAP_ADMIN_PASSWORD", None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from authsvc.core.config import TokenSettings  # noqa: E402
from authsvc.core.security import PasswordHasher  # noqa: E402
from authsvc.db.session import create_all_tables, engine  # noqa: E402
from authsvc.models.user import User  # noqa: E402
from authsvc.repositories.auth_repository import AuthRepository  # noqa: E402


@pytest.fixture
def db_engine():
    create_all_tables()
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(db_engine):
    with Session(db_engine) as s:
        yield s


@pytest.fixture
def repository(session):
    return AuthRepository(session)


@pytest.fixture
def token_settings():
    return TokenSettings(
        access_secret="test-access-secret",
        refresh_secret="test-refresh-secret",
    )


@pytest.fixture
def make_user(session):
    def _make(username="alice", password="correct-password", role="user", user_id=None):
        user = User(username=username, password_hash=PasswordHasher().hash(password), role=role)
        if user_id:
            user.id = user_id
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def client(db_engine):
    from authsvc.main import app

    return TestClient(app)
