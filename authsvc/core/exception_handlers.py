"""
Transport boundary for domain errors.

`ErrorKind` is turned into an HTTP status here and nowhere else. Response body:
    {"message": ..., "error": "Unauthorized", "statusCode": 401}
In dev the code, field and details are added for debugging.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from authsvc.core.config import Settings
from authsvc.core.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNPROCESSABLE: 422,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_NAMES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
}


def error_name(status_code: int) -> str:
    return ERROR_NAMES.get(status_code, "Internal Server Error")


def _respond(request: Request, status_code: int, message: str, extra: dict | None = None,
             exc: Exception | None = None) -> JSONResponse:
    line = "%s %s - %s: %s"
    args = (request.method, request.url.path, status_code, message)
    if status_code >= 500:
        logger.error(line, *args, exc_info=exc)
    else:
        logger.info(line, *args)

    body = {"message": message, "error": error_name(status_code), "statusCode": status_code}
    if extra:
        body.update(extra)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    debug = settings.is_dev

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        extra = None
        if debug:
            extra = {"errorCode": exc.code.value, "field": exc.field, "details": exc.details}
        return _respond(request, STATUS_BY_KIND[exc.kind], exc.message, extra)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _respond(
            request,
            422,
            "Invalid input",
            {"details": jsonable_errors(exc)},
        )

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        lower_msg = str(getattr(exc, "orig", exc)).lower()
        if "unique" in lower_msg:
            return _respond(request, status.HTTP_409_CONFLICT, "Resource already exists.")
        if "foreign key" in lower_msg:
            return _respond(request, status.HTTP_400_BAD_REQUEST,
                            "Related resource does not exist.")
        return _respond(request, status.HTTP_400_BAD_REQUEST, "Database constraint failed.")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else error_name(exc.status_code)
        return _respond(request, exc.status_code, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        extra = None
        if debug:
            extra = {"details": {"type": exc.__class__.__name__, "message": str(exc)}}
        return _respond(request, status.HTTP_500_INTERNAL_SERVER_ERROR,
                        "Internal server error", extra, exc=exc)


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
