from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

from jose import jwt  # python-jose

DEFAULT_ALG = "HS256"


# ---- common ----
def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def new_jti() -> str:
    return str(uuid4())


class TokenSigner:
    """
    Signing/verification capability.
    sign() adds `iat` and `exp` to a copy of the payload; verify() raises
    jose.JWTError (ExpiredSignatureError when `exp` has passed).
    """

    def __init__(self, algorithm: str = DEFAULT_ALG) -> None:
        self.algorithm = algorithm

    def sign(
        self,
        payload: Dict[str, Any],
        secret: str,
        ttl_seconds: int,
        issued_at: datetime | None = None,
    ) -> str:
        now = issued_at or utcnow()
        to_encode = payload.copy()
        to_encode["iat"] = int(now.timestamp())
        to_encode["exp"] = int((now + timedelta(seconds=ttl_seconds)).timestamp())
        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: str) -> Dict[str, Any]:
        return jwt.decode(token, secret, algorithms=[self.algorithm])
