from __future__ import annotations

from authsvc.models.user import UserPublic
from authsvc.services.credentials import CredentialValidator
from authsvc.services.token_issuer import TokenIssuer, TokenPair


class LoginResult(TokenPair):
    user: UserPublic


class AuthService:
    """Login = validate credentials, then issue tokens. Refresh = issue for a known identity."""

    def __init__(self, validator: CredentialValidator, issuer: TokenIssuer) -> None:
        self.validator = validator
        self.issuer = issuer

    def login(self, username: str, password: str) -> LoginResult:
        user = self.validator.validate(username, password)
        tokens = self.issuer.issue(user.id)
        return LoginResult(user=user, **tokens.model_dump())

    def refresh(self, user_id: str) -> TokenPair:
        return self.issuer.issue(user_id)
