"""
Product persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database
from core.filters import FilterSpec, where_clauses

_PRODUCT_COLUMNS = "p.id, p.name, p.stock, p.price, p.images, p.shop_id"


def _where(product_filter: FilterSpec, shop_filter: FilterSpec, args: list[Any]) -> str:
    clauses = where_clauses(product_filter, alias="p", args=args)
    clauses += where_clauses(shop_filter, alias="s", args=args)
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


async def count_products(db: Database, product_filter: FilterSpec, shop_filter: FilterSpec) -> int:
    args: list[Any] = []
    where = _where(product_filter, shop_filter, args)
    total = await db.fetch_val(
        f"""
        SELECT count(*)
        FROM products p
        JOIN shops s ON s.id = p.shop_id
        {where}
        """,
        *args,
    )
    return int(total or 0)


async def list_products(
    db: Database,
    product_filter: FilterSpec,
    shop_filter: FilterSpec,
    *,
    limit: int,
    offset: int,
) -> list[dict[str, Any]]:
    args: list[Any] = []
    where = _where(product_filter, shop_filter, args)
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT p.id, p.name, p.stock, p.price, s.id AS shop_id, s.name AS shop_name
        FROM products p
        JOIN shops s ON s.id = p.shop_id
        {where}
        ORDER BY p.id
        LIMIT ${len(args) - 1}
        OFFSET ${len(args)}
        """,
        *args,
    )


async def get_product(db: Database, product_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_PRODUCT_COLUMNS},
               s.name AS shop_name,
               s.admin_email AS shop_admin_email,
               s.user_id AS shop_user_id
        FROM products p
        JOIN shops s ON s.id = p.shop_id
        WHERE p.id = $1
        """,
        product_id,
    )


async def product_exists(db: Database, product_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM products
        WHERE id = $1
        """,
        product_id,
    )
    return row is not None


async def create_product(
    db: Database,
    *,
    name: str,
    stock: int,
    price: int,
    images: list[str] | None,
    shop_id: int,
) -> dict[str, Any]:
    row = await db.fetch_one(
        """
        INSERT INTO products (name, stock, price, images, shop_id)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING id, name, stock, price, images, shop_id
        """,
        name,
        stock,
        price,
        images,
        shop_id,
    )
    if row is None:
        raise RuntimeError("Failed to create product.")
    return row


async def update_product(
    db: Database,
    product_id: int,
    *,
    name: str | None,
    stock: int | None,
    price: int | None,
    images: list[str] | None,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        UPDATE products
        SET name = COALESCE($2, name),
            stock = COALESCE($3, stock),
            price = COALESCE($4, price),
            images = COALESCE($5, images),
            updated_at = now()
        WHERE id = $1
        RETURNING id, name, stock, price, images, shop_id
        """,
        product_id,
        name,
        stock,
        price,
        images,
    )


async def delete_product(db: Database, product_id: int) -> None:
    await db.execute(
        """
        DELETE FROM products
        WHERE id = $1
        """,
        product_id,
    )
