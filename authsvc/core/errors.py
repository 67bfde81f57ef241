"""
Typed domain errors.

Services raise `AppError` subclasses only. Each error carries a stable `ErrorCode`,
an optional human-readable message and field pointer, and an `ErrorKind` that the
transport layer turns into a status code (see core.exception_handlers).
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    # auth
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_UNAUTHORIZED = "AUTH_UNAUTHORIZED"
    AUTH_FORBIDDEN = "AUTH_FORBIDDEN"
    AUTH_REFRESH_TOKEN_INVALID = "AUTH_REFRESH_TOKEN_INVALID"
    AUTH_REFRESH_TOKEN_EXPIRED = "AUTH_REFRESH_TOKEN_EXPIRED"

    # validation
    VALIDATION_REQUIRED_FIELD = "VALIDATION_REQUIRED_FIELD"
    VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"
    VALIDATION_INVALID_LENGTH = "VALIDATION_INVALID_LENGTH"
    VALIDATION_INVALID_VALUE = "VALIDATION_INVALID_VALUE"

    # users
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    USER_EMAIL_ALREADY_EXISTS = "USER_EMAIL_ALREADY_EXISTS"
    USER_USERNAME_ALREADY_EXISTS = "USER_USERNAME_ALREADY_EXISTS"
    USER_INVALID_ROLE = "USER_INVALID_ROLE"

    # database
    DB_CONNECTION_ERROR = "DB_CONNECTION_ERROR"
    DB_QUERY_ERROR = "DB_QUERY_ERROR"
    DB_CONSTRAINT_ERROR = "DB_CONSTRAINT_ERROR"
    DB_FOREIGN_KEY_ERROR = "DB_FOREIGN_KEY_ERROR"

    # general
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNPROCESSABLE_ENTITY = "UNPROCESSABLE_ENTITY"


ERROR_MESSAGES = {
    ErrorCode.AUTH_INVALID_CREDENTIALS: "Invalid credentials. Please check your username and password.",
    ErrorCode.AUTH_TOKEN_EXPIRED: "Your session has expired. Please sign in again.",
    ErrorCode.AUTH_TOKEN_INVALID: "Invalid authentication token.",
    ErrorCode.AUTH_UNAUTHORIZED: "You are not allowed to access this resource.",
    ErrorCode.AUTH_FORBIDDEN: "Access forbidden. You lack the required permissions.",
    ErrorCode.AUTH_REFRESH_TOKEN_INVALID: "Invalid refresh token.",
    ErrorCode.AUTH_REFRESH_TOKEN_EXPIRED: "Refresh token expired.",
    ErrorCode.VALIDATION_REQUIRED_FIELD: "A required field is missing.",
    ErrorCode.VALIDATION_INVALID_FORMAT: "A field has an invalid format.",
    ErrorCode.VALIDATION_INVALID_LENGTH: "A field has an invalid length.",
    ErrorCode.VALIDATION_INVALID_VALUE: "A field has an invalid value.",
    ErrorCode.USER_NOT_FOUND: "User not found.",
    ErrorCode.USER_ALREADY_EXISTS: "User already exists.",
    ErrorCode.USER_EMAIL_ALREADY_EXISTS: "This email is already registered.",
    ErrorCode.USER_USERNAME_ALREADY_EXISTS: "This username is already registered.",
    ErrorCode.USER_INVALID_ROLE: "Invalid user role.",
    ErrorCode.DB_CONNECTION_ERROR: "Database connection error.",
    ErrorCode.DB_QUERY_ERROR: "Database query error.",
    ErrorCode.DB_CONSTRAINT_ERROR: "Database constraint error.",
    ErrorCode.DB_FOREIGN_KEY_ERROR: "Database foreign key error.",
    ErrorCode.INTERNAL_SERVER_ERROR: "Internal server error.",
    ErrorCode.BAD_REQUEST: "Bad request.",
    ErrorCode.NOT_FOUND: "Resource not found.",
    ErrorCode.CONFLICT: "Conflict with the current state of the resource.",
    ErrorCode.UNPROCESSABLE_ENTITY: "Unprocessable entity.",
}


class ErrorKind(str, Enum):
    """Status-code equivalent, mapped to a transport status at the boundary only."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE = "unprocessable"
    INTERNAL = "internal"


class AppError(Exception):
    kind: ErrorKind = ErrorKind.BAD_REQUEST

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        field: Optional[str] = None,
        details: Any = None,
    ) -> None:
        self.code = ErrorCode(code)
        self.message = message or ERROR_MESSAGES.get(self.code, self.code.value)
        self.field = field
        self.details = details
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, field={self.field!r})"


class InvalidCredentials(AppError):
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        super().__init__(ErrorCode.AUTH_INVALID_CREDENTIALS, message, field)


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED


class UserNotFound(AppError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: Optional[str] = None, field: Optional[str] = "userId") -> None:
        super().__init__(ErrorCode.USER_NOT_FOUND, message, field)


class Conflict(AppError):
    kind = ErrorKind.CONFLICT


class InternalError(AppError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(ErrorCode.INTERNAL_SERVER_ERROR, message)
