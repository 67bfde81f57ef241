from fastapi import Depends
from sqlmodel import Session

from authsvc.core.config import Settings, get_settings
from authsvc.core.security import PasswordHasher
from authsvc.core.tokens import TokenSigner
from authsvc.db.session import get_session
from authsvc.repositories.auth_repository import AuthRepository
from authsvc.services.auth_service import AuthService
from authsvc.services.credentials import CredentialValidator
from authsvc.services.token_issuer import TokenIssuer
from authsvc.services.user_service import UserService


def get_repository(db: Session = Depends(get_session)) -> AuthRepository:
    return AuthRepository(db)


def get_signer(settings: Settings = Depends(get_settings)) -> TokenSigner:
    return TokenSigner(settings.jwt_algorithm)


def get_auth_service(
    repository: AuthRepository = Depends(get_repository),
    signer: TokenSigner = Depends(get_signer),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    validator = CredentialValidator(repository, PasswordHasher())
    issuer = TokenIssuer(repository, signer, settings.token_settings())
    return AuthService(validator, issuer)


def get_user_service(repository: AuthRepository = Depends(get_repository)) -> UserService:
    return UserService(repository, PasswordHasher())
