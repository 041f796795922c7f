"""
Shop business logic.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import asyncpg

from auth.security import Principal
from core.db import Database
from core.errors import NotFoundError, conflict_from_db_error
from core.filters import build_filters
from core.pagination import PageRequest, PageResult, page_result

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_shop(row: dict) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "adminEmail": row["admin_email"],
        "userId": row["user_id"],
    }


def _with_relations(row: dict) -> dict[str, Any]:
    shop = _to_shop(row)
    shop["user"] = {"name": row["user_name"]}
    shop["products"] = list(row.get("products") or [])
    return shop


async def list_shops(
    db: Database,
    params: Mapping[str, Any],
    page: PageRequest,
) -> PageResult[dict[str, Any]]:
    filters = build_filters(params, "shop", "shop.products", "shop.user")
    shop_filter = filters["shop"]
    product_filter = filters["shop.products"]
    user_filter = filters["shop.user"]

    total = await repository.count_shops(db, shop_filter, product_filter, user_filter)
    rows = await repository.list_shops(
        db,
        shop_filter,
        product_filter,
        user_filter,
        limit=page.limit,
        offset=page.offset,
    )
    return page_result([_with_relations(row) for row in rows], total, page)


async def get_shop(db: Database, shop_id: int) -> dict[str, Any]:
    row = await repository.get_shop(db, shop_id)
    if row is None:
        raise NotFoundError("Shop not found")
    return _with_relations(row)


async def create_shop(db: Database, payload: schemas.ShopCreate, *, owner: Principal) -> dict[str, Any]:
    try:
        row = await repository.create_shop(
            db,
            name=payload.name,
            admin_email=payload.admin_email,
            user_id=owner.id,
        )
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    logger.info("shop_created shop_id=%s user_id=%s", row["id"], owner.id)
    return _to_shop(row)


async def update_shop(db: Database, shop_id: int, payload: schemas.ShopUpdate) -> dict[str, Any]:
    if not await repository.shop_exists(db, shop_id):
        raise NotFoundError("Shop not found")

    try:
        row = await repository.update_shop(
            db,
            shop_id,
            name=payload.name,
            admin_email=payload.admin_email,
        )
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    if row is None:
        raise NotFoundError("Shop not found")

    logger.info("shop_updated shop_id=%s", shop_id)
    return _to_shop(row)


async def delete_shop(db: Database, shop_id: int) -> None:
    if not await repository.shop_exists(db, shop_id):
        raise NotFoundError("Shop not found")

    try:
        await repository.delete_shop(db, shop_id)
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    logger.info("shop_deleted shop_id=%s", shop_id)
