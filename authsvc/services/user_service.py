from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from authsvc.core.config import Settings
from authsvc.core.errors import AppError, Conflict, ErrorCode, InternalError, UserNotFound
from authsvc.core.security import PasswordHasher
from authsvc.models.user import User, UserCreate, UserPublic, UserUpdate
from authsvc.repositories.auth_repository import AuthRepository

log = logging.getLogger(__name__)


class UserService:
    """Single-record user management. Passwords are hashed here and never returned."""

    def __init__(self, repository: AuthRepository, hasher: PasswordHasher) -> None:
        self.repository = repository
        self.hasher = hasher

    def create(self, data: UserCreate) -> UserPublic:
        try:
            user = User(
                **data.model_dump(exclude={"password"}),
                password_hash=self.hasher.hash(data.password),
            )
            return UserPublic.model_validate(self.repository.create_user(user))
        except IntegrityError:
            raise Conflict(ErrorCode.USER_ALREADY_EXISTS, "User already exists")
        except AppError:
            raise
        except Exception:
            log.exception("user creation failed")
            raise InternalError("Error while creating the user")

    def get(self, user_id: str) -> UserPublic:
        return UserPublic.model_validate(self._load(user_id))

    def update(self, user_id: str, data: UserUpdate) -> UserPublic:
        user = self._load(user_id)
        changes = data.model_dump(exclude_unset=True, exclude={"password"})
        if data.password is not None:
            changes["password_hash"] = self.hasher.hash(data.password)
        try:
            return UserPublic.model_validate(self.repository.update_user(user, changes))
        except IntegrityError:
            raise Conflict(ErrorCode.USER_ALREADY_EXISTS, "User data already exists")
        except Exception:
            log.exception("user update failed user_id=%s", user_id)
            raise InternalError("Error while updating the user")

    def delete(self, user_id: str) -> None:
        user = self._load(user_id)
        try:
            self.repository.delete_user(user)
        except Exception:
            log.exception("user deletion failed user_id=%s", user_id)
            raise InternalError("Error while deleting the user")
        log.info("deleted user_id=%s", user_id)

    def _load(self, user_id: str) -> User:
        try:
            user = self.repository.find_user_by_id(user_id)
        except Exception:
            log.exception("user lookup failed user_id=%s", user_id)
            raise InternalError("Error while looking up the user")
        if user is None:
            raise UserNotFound("User not found")
        return user


def ensure_bootstrap_admin(db: Session, settings: Settings) -> Optional[str]:
    """
    Upsert the bootstrap admin from BOOTSTRAP_ADMIN_USERNAME / BOOTSTRAP_ADMIN_PASSWORD.
    Returns the admin's id, or None when not configured.
    """
    username = settings.bootstrap_admin_username
    password = settings.bootstrap_admin_password
    if not username or not password:
        return None

    repository = AuthRepository(db)
    existing = repository.find_user_by_username(username)
    if existing:
        return existing.id

    service = UserService(repository, PasswordHasher())
    admin = service.create(UserCreate(username=username, password=password, role="admin"))
    log.info("bootstrap admin created user_id=%s", admin.id)
    return admin.id
