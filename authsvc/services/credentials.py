from __future__ import annotations

import logging

from authsvc.core.errors import AppError, InternalError, InvalidCredentials
from authsvc.core.security import PasswordHasher
from authsvc.models.user import UserPublic
from authsvc.repositories.auth_repository import AuthRepository

log = logging.getLogger(__name__)


class CredentialValidator:
    def __init__(self, repository: AuthRepository, hasher: PasswordHasher) -> None:
        self.repository = repository
        self.hasher = hasher

    def validate(self, username: str, password: str) -> UserPublic:
        """
        Confirm `username`/`password` against the stored hash.
        Returns the identity without its password hash.
        """
        try:
            user = self.repository.find_user_by_username(username)
            if user is None:
                log.info("login rejected: unknown username")
                raise InvalidCredentials(field="username")

            if not self.hasher.verify(password, user.password_hash):
                log.info("login rejected: password mismatch for user_id=%s", user.id)
                raise InvalidCredentials(field="password")

            return UserPublic.model_validate(user)
        except AppError:
            raise
        except Exception:
            log.exception("credential validation failed")
            raise InternalError("Error while validating the user")
