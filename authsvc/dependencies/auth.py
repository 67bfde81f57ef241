from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from pydantic import BaseModel

from authsvc.core.config import Settings, get_settings
from authsvc.core.errors import ErrorCode, InternalError, Unauthorized
from authsvc.core.tokens import TokenSigner, as_utc, utcnow
from authsvc.dependencies.services import get_repository, get_signer
from authsvc.repositories.auth_repository import AuthRepository

log = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """Decoded bearer claims; `user_id` is the token subject."""

    user_id: str
    role: Optional[str] = None
    jti: Optional[str] = None


def _extract_bearer(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized(ErrorCode.AUTH_UNAUTHORIZED, "No token provided")
    return credentials.credentials


def _to_identity(payload: dict, invalid: ErrorCode) -> Identity:
    sub = payload.get("sub")
    if not sub:
        raise Unauthorized(invalid, field="sub")
    return Identity(user_id=sub, role=payload.get("role"), jti=payload.get("jti"))


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    signer: TokenSigner = Depends(get_signer),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Strict access-token guard."""
    token = _extract_bearer(credentials)
    try:
        payload = signer.verify(token, settings.jwt_secret)
    except ExpiredSignatureError:
        raise Unauthorized(ErrorCode.AUTH_TOKEN_EXPIRED)
    except JWTError:
        raise Unauthorized(ErrorCode.AUTH_TOKEN_INVALID)
    return _to_identity(payload, ErrorCode.AUTH_TOKEN_INVALID)


def get_refresh_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    signer: TokenSigner = Depends(get_signer),
    settings: Settings = Depends(get_settings),
    repository: AuthRepository = Depends(get_repository),
) -> Identity:
    """
    Refresh-token guard: signature and expiry against the refresh secret, then the
    jti record must still exist and be unexpired. A deleted record means revoked.
    """
    token = _extract_bearer(credentials)
    try:
        payload = signer.verify(token, settings.jwt_refresh_secret)
    except ExpiredSignatureError:
        raise Unauthorized(ErrorCode.AUTH_REFRESH_TOKEN_EXPIRED)
    except JWTError:
        raise Unauthorized(ErrorCode.AUTH_REFRESH_TOKEN_INVALID)

    identity = _to_identity(payload, ErrorCode.AUTH_REFRESH_TOKEN_INVALID)
    if not identity.jti:
        raise Unauthorized(ErrorCode.AUTH_REFRESH_TOKEN_INVALID, field="jti")

    try:
        record = repository.find_refresh_token(identity.jti)
    except Exception:
        log.exception("refresh record lookup failed jti=%s", identity.jti)
        raise InternalError("Error while checking the refresh token")
    if record is None or record.user_id != identity.user_id:
        log.info("refresh rejected: no record for jti=%s", identity.jti)
        raise Unauthorized(ErrorCode.AUTH_REFRESH_TOKEN_INVALID)
    if as_utc(record.expires_at) <= utcnow():
        raise Unauthorized(ErrorCode.AUTH_REFRESH_TOKEN_EXPIRED)
    return identity
