"""
User business logic.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import asyncpg

from core.db import Database
from core.errors import NotFoundError, conflict_from_db_error
from core.filters import build_filters
from core.pagination import PageRequest, PageResult, page_result

from . import repository, schemas

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "User not found"


def _to_user(row: dict) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "age": row["age"],
        "role": row["role"],
        "address": row["address"],
        "shopId": row["shop_id"],
    }


async def list_users(
    db: Database,
    params: Mapping[str, Any],
    page: PageRequest,
) -> PageResult[dict[str, Any]]:
    user_filter = build_filters(params, "user")["user"]
    total = await repository.count_users(db, user_filter)
    rows = await repository.list_users(db, user_filter, limit=page.limit, offset=page.offset)
    return page_result([_to_user(row) for row in rows], total, page)


async def get_user(db: Database, user_id: int) -> dict[str, Any]:
    row = await repository.get_user(db, user_id)
    if row is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return _to_user(row)


async def update_user(db: Database, user_id: int, payload: schemas.UserUpdate) -> dict[str, Any]:
    if await repository.get_user(db, user_id) is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    try:
        row = await repository.update_user(
            db,
            user_id,
            name=payload.name,
            age=payload.age,
            role=payload.role,
            address=payload.address,
            shop_id=payload.shop_id,
        )
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    if row is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    logger.info("user_updated user_id=%s", user_id)
    return _to_user(row)


async def delete_user(db: Database, user_id: int) -> None:
    if await repository.get_user(db, user_id) is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    try:
        await repository.delete_user(db, user_id)
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    logger.info("user_deleted user_id=%s", user_id)
