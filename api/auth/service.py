"""
Auth business logic.
"""

from __future__ import annotations

import logging

import asyncpg

from core.db import Database
from core.errors import AuthenticationError, ConflictError, conflict_from_db_error

from . import repository, schemas, security

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "member"


def _to_principal(row: dict) -> security.Principal:
    return security.Principal(
        id=int(row["user_id"]),
        email=str(row["email"]),
        username=str(row["name"]),
        role=str(row.get("role") or DEFAULT_ROLE),
        auth_id=int(row["auth_id"]),
    )


async def login(db: Database, payload: schemas.LoginRequest) -> dict:
    row = await repository.get_credentials_by_email(db, payload.email)
    if row is None:
        logger.info("login_failed reason=unknown_account email=%s", repository.normalize_email(payload.email))
        raise AuthenticationError("User does not exist", status_code=404)

    if not security.verify_password(payload.password, str(row.get("password_hash") or "")):
        logger.info("login_failed reason=bad_password email=%s", row["email"])
        raise AuthenticationError("Incorrect password")

    principal = _to_principal(row)
    token = security.issue_access_token(principal)
    logger.info("login_succeeded user_id=%s", principal.id)
    return {
        "username": principal.username,
        "token": token,
        "tokenType": "bearer",
    }


async def register(db: Database, payload: schemas.RegisterRequest) -> dict:
    existing = await repository.get_credentials_by_email(db, payload.email)
    if existing is not None:
        raise ConflictError("Email is already registered.")

    password_hash = security.hash_password(payload.password)
    try:
        row = await repository.create_account(
            db,
            name=payload.name.strip(),
            email=payload.email,
            password_hash=password_hash,
            role=DEFAULT_ROLE,
            age=payload.age,
            address=payload.address,
        )
    except asyncpg.exceptions.UniqueViolationError as exc:
        raise ConflictError("Email is already registered.") from exc
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    logger.info("user_registered user_id=%s", row["id"])
    return {
        "id": int(row["id"]),
        "name": str(row["name"]),
        "email": str(row["email"]),
        "role": str(row["role"]),
    }


async def principal_from_access_token(db: Database, access_token: str) -> security.Principal:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise AuthenticationError(str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthenticationError("Invalid access token subject.")

    row = await repository.get_credentials_by_user_id(db, int(subject))
    if row is None:
        raise AuthenticationError("User not found.")
    return _to_principal(row)
