"""
Product business logic.
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


def _to_product(row: dict) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "stock": row["stock"],
        "price": row["price"],
        "images": list(row.get("images") or []),
        "shopId": row["shop_id"],
    }


def _to_list_item(row: dict) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "stock": row["stock"],
        "price": row["price"],
        "shop": {"id": row["shop_id"], "name": row["shop_name"]},
    }


async def list_products(
    db: Database,
    params: Mapping[str, Any],
    page: PageRequest,
) -> PageResult[dict[str, Any]]:
    filters = build_filters(params, "product", "product.shop")
    product_filter = filters["product"]
    shop_filter = filters["product.shop"]

    total = await repository.count_products(db, product_filter, shop_filter)
    rows = await repository.list_products(
        db,
        product_filter,
        shop_filter,
        limit=page.limit,
        offset=page.offset,
    )
    return page_result([_to_list_item(row) for row in rows], total, page)


async def get_product(db: Database, product_id: int) -> dict[str, Any]:
    row = await repository.get_product(db, product_id)
    if row is None:
        raise NotFoundError("Data not found")

    product = _to_product(row)
    product["shop"] = {
        "id": row["shop_id"],
        "name": row["shop_name"],
        "adminEmail": row["shop_admin_email"],
        "userId": row["shop_user_id"],
    }
    return product


async def create_product(db: Database, payload: schemas.ProductCreate) -> dict[str, Any]:
    try:
        row = await repository.create_product(
            db,
            name=payload.name,
            stock=payload.stock,
            price=payload.price,
            images=payload.images,
            shop_id=payload.shop_id,
        )
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    logger.info("product_created product_id=%s shop_id=%s", row["id"], row["shop_id"])
    return _to_product(row)


async def update_product(
    db: Database,
    product_id: int,
    payload: schemas.ProductUpdate,
) -> dict[str, Any]:
    if not await repository.product_exists(db, product_id):
        raise NotFoundError("Data not found")

    try:
        row = await repository.update_product(
            db,
            product_id,
            name=payload.name,
            stock=payload.stock,
            price=payload.price,
            images=payload.images,
        )
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    # Deleted between the existence check and the write.
    if row is None:
        raise NotFoundError("Data not found")

    logger.info("product_updated product_id=%s", product_id)
    return _to_product(row)


async def delete_product(db: Database, product_id: int) -> None:
    if not await repository.product_exists(db, product_id):
        raise NotFoundError("Data not found")

    try:
        await repository.delete_product(db, product_id)
    except asyncpg.PostgresError as exc:
        raise conflict_from_db_error(exc) from exc

    logger.info("product_deleted product_id=%s", product_id)
