from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class RefreshToken(SQLModel, table=True):
    """
    One row per issued refresh token.
    - jti: token identifier embedded in the claims; lookup/revocation key
    - token: the signed refresh token
    - expires_at: issuance time + refresh TTL
    Rows are never updated. Rotation inserts a new row; deleting a row revokes the token.
    """
    __tablename__ = "refresh_tokens"

    jti: str = Field(primary_key=True)
    token: str = Field(nullable=False)
    user_id: str = Field(index=True, foreign_key="users.id", ondelete="CASCADE")
    expires_at: datetime = Field(sa_type=DateTime(timezone=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc),
        sa_type=DateTime(timezone=True),
    )
