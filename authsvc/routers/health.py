import logging
import time

from fastapi import APIRouter, Depends
from sqlmodel import text

from authsvc.core.config import Settings, get_settings
from authsvc.core.errors import InternalError
from authsvc.db.session import engine

log = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_STARTED = time.monotonic()


@router.get("/")
def index(settings: Settings = Depends(get_settings)):
    return {
        "message": "authsvc backend template",
        "version": settings.app_version,
        "endpoints": {
            "docs": "/docs",
            "auth": ["POST /auth/login", "POST /auth/refresh"],
            "users": [
                "POST /users",
                "GET /users/me",
                "GET /users/{id}",
                "PATCH /users/{id}",
                "DELETE /users/{id}",
            ],
        },
    }


@router.get("/health")
def health_app():
    return {"ok": True, "uptime": round(time.monotonic() - _STARTED, 3)}


@router.get("/health/db")
def health_db():
    # Migrations are a deployment concern; this only checks connectivity.
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception:
        log.exception("database health check failed")
        raise InternalError("Database connection failed")
