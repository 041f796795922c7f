"""
Shop persistence (raw SQL).

Listing filters on three tables: the shop itself, its products and its owner.
Product filters are applied through EXISTS so a shop is counted once no
matter how many of its products match.
"""

from __future__ import annotations

from typing import Any

from core.db import Database
from core.filters import FilterSpec, where_clauses

_SHOP_COLUMNS = "s.id, s.name, s.admin_email, s.user_id"


def _where(
    shop_filter: FilterSpec,
    product_filter: FilterSpec,
    user_filter: FilterSpec,
    args: list[Any],
) -> tuple[str, list[str]]:
    """
    Return the WHERE clause for shops and the product predicates, which the
    data query reuses for the embedded product list.
    """
    clauses = where_clauses(shop_filter, alias="s", args=args)
    clauses += where_clauses(user_filter, alias="u", args=args)
    product_clauses = where_clauses(product_filter, alias="p", args=args)
    if product_clauses:
        clauses.append(
            "EXISTS (SELECT 1 FROM products p WHERE p.shop_id = s.id AND "
            + " AND ".join(product_clauses)
            + ")"
        )
    where = "WHERE " + " AND ".join(clauses) if clauses else ""
    return where, product_clauses


async def count_shops(
    db: Database,
    shop_filter: FilterSpec,
    product_filter: FilterSpec,
    user_filter: FilterSpec,
) -> int:
    args: list[Any] = []
    where, _ = _where(shop_filter, product_filter, user_filter, args)
    total = await db.fetch_val(
        f"""
        SELECT count(*)
        FROM shops s
        JOIN users u ON u.id = s.user_id
        {where}
        """,
        *args,
    )
    return int(total or 0)


async def list_shops(
    db: Database,
    shop_filter: FilterSpec,
    product_filter: FilterSpec,
    user_filter: FilterSpec,
    *,
    limit: int,
    offset: int,
) -> list[dict[str, Any]]:
    args: list[Any] = []
    where, product_clauses = _where(shop_filter, product_filter, user_filter, args)
    product_where = "".join(f" AND {clause}" for clause in product_clauses)
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT
          {_SHOP_COLUMNS},
          u.name AS user_name,
          COALESCE(
            (
              SELECT json_agg(
                json_build_object(
                  'id', p.id,
                  'name', p.name,
                  'images', p.images,
                  'stock', p.stock,
                  'price', p.price
                )
                ORDER BY p.id
              )
              FROM products p
              WHERE p.shop_id = s.id{product_where}
            ),
            '[]'::json
          ) AS products
        FROM shops s
        JOIN users u ON u.id = s.user_id
        {where}
        ORDER BY s.id
        LIMIT ${len(args) - 1}
        OFFSET ${len(args)}
        """,
        *args,
    )


async def get_shop(db: Database, shop_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT
          {_SHOP_COLUMNS},
          u.name AS user_name,
          COALESCE(
            (
              SELECT json_agg(
                json_build_object(
                  'id', p.id,
                  'name', p.name,
                  'images', p.images,
                  'stock', p.stock,
                  'price', p.price
                )
                ORDER BY p.id
              )
              FROM products p
              WHERE p.shop_id = s.id
            ),
            '[]'::json
          ) AS products
        FROM shops s
        JOIN users u ON u.id = s.user_id
        WHERE s.id = $1
        """,
        shop_id,
    )


async def shop_exists(db: Database, shop_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM shops
        WHERE id = $1
        """,
        shop_id,
    )
    return row is not None


async def create_shop(db: Database, *, name: str, admin_email: str, user_id: int) -> dict[str, Any]:
    row = await db.fetch_one(
        """
        INSERT INTO shops (name, admin_email, user_id)
        VALUES ($1, $2, $3)
        RETURNING id, name, admin_email, user_id
        """,
        name,
        admin_email,
        user_id,
    )
    if row is None:
        raise RuntimeError("Failed to create shop.")
    return row


async def update_shop(
    db: Database,
    shop_id: int,
    *,
    name: str | None,
    admin_email: str | None,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        UPDATE shops
        SET name = COALESCE($2, name),
            admin_email = COALESCE($3, admin_email),
            updated_at = now()
        WHERE id = $1
        RETURNING id, name, admin_email, user_id
        """,
        shop_id,
        name,
        admin_email,
    )


async def delete_shop(db: Database, shop_id: int) -> None:
    await db.execute(
        """
        DELETE FROM shops
        WHERE id = $1
        """,
        shop_id,
    )
