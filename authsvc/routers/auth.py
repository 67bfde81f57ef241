from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from authsvc.dependencies.auth import Identity, get_refresh_identity
from authsvc.dependencies.services import get_auth_service
from authsvc.models.user import UserPublic
from authsvc.services.auth_service import AuthService

auth_router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class LoginResponse(TokenResponse):
    user: UserPublic


@auth_router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return auth.login(body.username, body.password)


@auth_router.post("/refresh", response_model=TokenResponse, response_model_by_alias=True)
def refresh(
    identity: Identity = Depends(get_refresh_identity),
    auth: AuthService = Depends(get_auth_service),
):
    """Rotate: mint a new access/refresh pair under a new jti."""
    return auth.refresh(identity.user_id)
