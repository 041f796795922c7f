"""
Error taxonomy shared by all feature packages.

Services raise `AppError` subclasses; the application turns them into the
failure envelope in one place (see `api/main.py`).
"""

from __future__ import annotations

from enum import Enum

import asyncpg


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTHENTICATION = "authentication"
    UNEXPECTED = "unexpected"


class ConfigurationError(RuntimeError):
    """
    Raised at startup when required settings are missing or invalid.
    """


class AppError(Exception):
    kind: ErrorKind = ErrorKind.UNEXPECTED
    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    status_code = 400


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    status_code = 400


class AuthenticationError(AppError):
    kind = ErrorKind.AUTHENTICATION
    status_code = 401


class UnexpectedError(AppError):
    kind = ErrorKind.UNEXPECTED
    status_code = 500


def conflict_from_db_error(exc: asyncpg.PostgresError) -> ConflictError:
    """
    Map a storage-level constraint or data error to a ConflictError.
    """
    if isinstance(exc, asyncpg.exceptions.UniqueViolationError):
        return ConflictError("Record already exists.")
    if isinstance(exc, asyncpg.exceptions.ForeignKeyViolationError):
        return ConflictError("Referenced record does not exist or is still in use.")
    if isinstance(exc, asyncpg.exceptions.NotNullViolationError):
        return ConflictError("A required field is missing.")
    if isinstance(exc, asyncpg.exceptions.CheckViolationError):
        return ConflictError("A field value is out of range.")
    return ConflictError("Database error.")
