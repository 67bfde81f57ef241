from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from authsvc.models.refresh_token import RefreshToken
from authsvc.models.user import User


class AuthRepository:
    """
    Storage collaborator over a SQLModel session.
    Every write is a single commit; on failure the session is rolled back and the
    driver error propagates to the calling service, which wraps it.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---- users ----
    def find_user_by_username(self, username: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.username == username)).first()

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def create_user(self, user: User) -> User:
        self._commit(user)
        self.session.refresh(user)
        return user

    def update_user(self, user: User, changes: Dict[str, Any]) -> User:
        for key, value in changes.items():
            setattr(user, key, value)
        user.updated_at = datetime.now(tz=timezone.utc)
        self._commit(user)
        self.session.refresh(user)
        return user

    def delete_user(self, user: User) -> None:
        try:
            self.session.exec(delete(RefreshToken).where(RefreshToken.user_id == user.id))
            self.session.delete(user)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # ---- refresh tokens ----
    def create_refresh_token(self, record: RefreshToken) -> RefreshToken:
        self._commit(record)
        return record

    def find_refresh_token(self, jti: str) -> Optional[RefreshToken]:
        return self.session.get(RefreshToken, jti)

    def _commit(self, row) -> None:
        try:
            self.session.add(row)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
