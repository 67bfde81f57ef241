# authsvc/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authsvc.core.config import get_settings
from authsvc.core.exception_handlers import register_exception_handlers
from authsvc.core.logging_config import setup_logging
from authsvc.db.session import create_all_tables, session_scope
from authsvc.routers import health
from authsvc.routers.auth import auth_router
from authsvc.routers.user import user_router
from authsvc.services.user_service import ensure_bootstrap_admin

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        create_all_tables()
    with session_scope() as db:
        admin_id = ensure_bootstrap_admin(db, settings)
    if admin_id:
        logger.info("bootstrap admin ready user_id=%s", admin_id)
    yield


app = FastAPI(
    title="authsvc",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app, settings)

# routers
app.include_router(health.router)
app.include_router(auth_router)
app.include_router(user_router)
