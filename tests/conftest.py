"""
Shared fixtures.

The database is replaced by `FakeDatabase`, which records every SQL call and
returns results queued by the test, so no PostgreSQL server is needed.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Any

import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from auth import dependencies as auth_dependencies
from auth.security import Principal
from core.db import get_db
from main import create_app

TEST_SECRET = "test-signing-key-that-is-long-enough-for-hs256"


class FakeDatabase:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self._results: dict[str, deque] = defaultdict(deque)

    def queue(self, method: str, *results: Any) -> None:
        self._results[method].extend(results)

    def _next(self, method: str, default: Any) -> Any:
        pending = self._results[method]
        if not pending:
            return default
        result = pending.popleft()
        if isinstance(result, BaseException):
            raise result
        return result

    def calls_to(self, method: str) -> list[tuple[str, tuple[Any, ...]]]:
        return [(sql, args) for (name, sql, args) in self.calls if name == method]

    def executed(self, keyword: str) -> bool:
        return any(keyword in sql for (_, sql, _) in self.calls)

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls.append(("fetch_one", sql, args))
        return self._next("fetch_one", None)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append(("fetch_all", sql, args))
        return self._next("fetch_all", [])

    async def fetch_val(self, sql: str, *args: Any) -> Any:
        self.calls.append(("fetch_val", sql, args))
        return self._next("fetch_val", 0)

    async def execute(self, sql: str, *args: Any) -> None:
        self.calls.append(("execute", sql, args))
        self._next("execute", None)


@pytest.fixture(autouse=True)
def token_settings(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("JWT_EXPIRED", "1h")
    monkeypatch.setenv("JWT_ALG", "HS256")
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def principal() -> Principal:
    return Principal(id=7, email="owner@example.com", username="Owner", role="member", auth_id=3)


@pytest.fixture
def password_hash() -> str:
    return bcrypt.hashpw(b"correct-horse", bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture
def credential_row(password_hash) -> dict[str, Any]:
    return {
        "auth_id": 3,
        "email": "owner@example.com",
        "password_hash": password_hash,
        "user_id": 7,
        "name": "Owner",
        "role": "member",
    }


@pytest.fixture
def app(fake_db):
    application = create_app()
    application.dependency_overrides[get_db] = lambda: fake_db
    return application


@pytest.fixture
def authed_app(app, principal):
    app.dependency_overrides[auth_dependencies.get_current_user] = lambda: principal
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest_asyncio.fixture
async def authed_client(authed_app):
    transport = ASGITransport(app=authed_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
