from __future__ import annotations

import logging
from datetime import timedelta

from pydantic import BaseModel

from authsvc.core.config import TokenSettings
from authsvc.core.errors import AppError, InternalError, UserNotFound
from authsvc.core.tokens import TokenSigner, new_jti, utcnow
from authsvc.models.refresh_token import RefreshToken
from authsvc.repositories.auth_repository import AuthRepository

log = logging.getLogger(__name__)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Mints an access/refresh pair for a user and records the refresh token.

    Every call uses a fresh jti. Earlier records for the same user are left untouched,
    so rotation supersedes rather than revokes.
    """

    def __init__(
        self,
        repository: AuthRepository,
        signer: TokenSigner,
        settings: TokenSettings,
    ) -> None:
        self.repository = repository
        self.signer = signer
        self.settings = settings

    def issue(self, user_id: str) -> TokenPair:
        try:
            user = self.repository.find_user_by_id(user_id)
            if user is None:
                raise UserNotFound("User not found while issuing tokens")

            jti = new_jti()
            payload = {"sub": str(user_id), "role": user.role, "jti": jti}
            issued_at = utcnow()

            access_token = self.signer.sign(
                payload,
                self.settings.access_secret,
                self.settings.access_ttl_seconds,
                issued_at=issued_at,
            )
            refresh_token = self.signer.sign(
                payload,
                self.settings.refresh_secret,
                self.settings.refresh_ttl_seconds,
                issued_at=issued_at,
            )

            self.repository.create_refresh_token(
                RefreshToken(
                    jti=jti,
                    token=refresh_token,
                    user_id=str(user_id),
                    expires_at=issued_at + timedelta(seconds=self.settings.refresh_ttl_seconds),
                    created_at=issued_at,
                )
            )
        except AppError:
            raise
        except Exception:
            log.exception("token issuance failed for user_id=%s", user_id)
            raise InternalError("Error while generating authentication tokens")

        log.info("issued tokens user_id=%s jti=%s", user_id, jti)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)
