# authsvc/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

ALLOWED_ENVS = {"dev", "prod", "test"}


class TokenSettings(BaseModel):
    """Secrets and validity windows handed to the token issuer."""

    access_secret: str
    refresh_secret: str
    access_ttl_seconds: int = 15 * 60
    refresh_ttl_seconds: int = 30 * 24 * 60 * 60


class Settings(BaseSettings):
    # app
    app_env: str = Field("dev", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_allow_origins: str = Field("http://localhost:3000", alias="CORS_ALLOW_ORIGINS")

    # DB
    database_url: str = Field("sqlite:///./authsvc.db", alias="DATABASE_URL")
    database_driver: str = Field("psycopg2", alias="DATABASE_DRIVER")
    db_sslmode: Optional[str] = Field(None, alias="DB_SSLMODE")
    auto_create_tables: bool = Field(False, alias="AUTO_CREATE_TABLES")

    # JWT
    jwt_secret: str = Field("dev-access-secret-change-me", alias="JWT_SECRET")
    jwt_refresh_secret: str = Field("dev-refresh-secret-change-me", alias="JWT_REFRESH_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_days: int = Field(30, alias="REFRESH_TOKEN_EXPIRE_DAYS")

    # first admin account, created at startup when both are set
    bootstrap_admin_username: Optional[str] = Field(None, alias="BOOTSTRAP_ADMIN_USERNAME")
    bootstrap_admin_password: Optional[str] = Field(None, alias="BOOTSTRAP_ADMIN_PASSWORD")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_dev(self) -> bool:
        return self.app_env.strip().lower() == "dev"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    def token_settings(self) -> TokenSettings:
        return TokenSettings(
            access_secret=self.jwt_secret,
            refresh_secret=self.jwt_refresh_secret,
            access_ttl_seconds=self.access_token_expire_minutes * 60,
            refresh_ttl_seconds=self.refresh_token_expire_days * 24 * 60 * 60,
        )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    env = settings.app_env.strip().lower()
    if env not in ALLOWED_ENVS:
        allowed = "|".join(sorted(ALLOWED_ENVS))
        raise RuntimeError(f"APP_ENV must be one of {allowed}")
    if settings.jwt_secret == settings.jwt_refresh_secret:
        raise RuntimeError("JWT_SECRET and JWT_REFRESH_SECRET must differ")
    return settings
