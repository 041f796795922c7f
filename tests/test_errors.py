"""Tests for error mapping and the response envelope."""

from __future__ import annotations

import asyncpg
import pytest

from core import errors


@pytest.mark.asyncio
async def test_unexpected_error_is_generic(authed_client, fake_db):
    fake_db.queue("fetch_val", RuntimeError("connection reset by peer"))

    resp = await authed_client.get("/products")

    assert resp.status_code == 500
    assert resp.json() == {
        "status": "Failed",
        "message": "An unexpected error occurred",
        "isSuccess": False,
        "data": None,
    }


@pytest.mark.asyncio
async def test_unexpected_error_detail_in_debug(authed_client, fake_db, monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    fake_db.queue("fetch_val", RuntimeError("connection reset by peer"))

    resp = await authed_client.get("/products")

    assert resp.status_code == 500
    assert resp.json()["message"] == "connection reset by peer"


@pytest.mark.asyncio
async def test_health_has_no_envelope(client):
    resp = await client.get("/health")

    assert resp.json() == {"status": "ok"}


@pytest.mark.parametrize(
    "error_cls,status,kind",
    [
        (errors.NotFoundError, 404, errors.ErrorKind.NOT_FOUND),
        (errors.ValidationError, 400, errors.ErrorKind.VALIDATION),
        (errors.ConflictError, 400, errors.ErrorKind.CONFLICT),
        (errors.AuthenticationError, 401, errors.ErrorKind.AUTHENTICATION),
        (errors.UnexpectedError, 500, errors.ErrorKind.UNEXPECTED),
    ],
)
def test_error_kinds(error_cls, status, kind):
    exc = error_cls("boom")
    assert exc.status_code == status
    assert exc.kind is kind
    assert exc.message == "boom"


def test_status_override_does_not_leak_to_class():
    exc = errors.AuthenticationError("User does not exist", status_code=404)
    assert exc.status_code == 404
    assert errors.AuthenticationError("x").status_code == 401


@pytest.mark.parametrize(
    "db_error,message",
    [
        (asyncpg.exceptions.UniqueViolationError, "Record already exists."),
        (asyncpg.exceptions.ForeignKeyViolationError, "Referenced record does not exist or is still in use."),
        (asyncpg.exceptions.NotNullViolationError, "A required field is missing."),
        (asyncpg.exceptions.CheckViolationError, "A field value is out of range."),
        (asyncpg.exceptions.DataError, "Database error."),
    ],
)
def test_conflict_from_db_error(db_error, message):
    conflict = errors.conflict_from_db_error(db_error("x"))
    assert isinstance(conflict, errors.ConflictError)
    assert conflict.status_code == 400
    assert conflict.message == message


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client):
    resp = await client.get("/orders")

    assert resp.status_code == 404
    assert resp.json()["isSuccess"] is False
    assert resp.json()["data"] is None


@pytest.mark.asyncio
async def test_startup_requires_token_settings(monkeypatch):
    from main import create_app, lifespan

    monkeypatch.delenv("JWT_SECRET")
    monkeypatch.setenv("DATABASE_URL", "postgresql://unused@localhost/unused")

    with pytest.raises(errors.ConfigurationError):
        async with lifespan(create_app()):
            pass
