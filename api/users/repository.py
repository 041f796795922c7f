"""
User persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database
from core.filters import FilterSpec, where_clauses

_USER_COLUMNS = "u.id, u.name, u.age, u.role, u.address, u.shop_id"


def _where(user_filter: FilterSpec, args: list[Any]) -> str:
    clauses = where_clauses(user_filter, alias="u", args=args)
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


async def count_users(db: Database, user_filter: FilterSpec) -> int:
    args: list[Any] = []
    where = _where(user_filter, args)
    total = await db.fetch_val(
        f"""
        SELECT count(*)
        FROM users u
        {where}
        """,
        *args,
    )
    return int(total or 0)


async def list_users(
    db: Database,
    user_filter: FilterSpec,
    *,
    limit: int,
    offset: int,
) -> list[dict[str, Any]]:
    args: list[Any] = []
    where = _where(user_filter, args)
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users u
        {where}
        ORDER BY u.id
        LIMIT ${len(args) - 1}
        OFFSET ${len(args)}
        """,
        *args,
    )


async def get_user(db: Database, user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users u
        WHERE u.id = $1
        """,
        user_id,
    )


async def update_user(
    db: Database,
    user_id: int,
    *,
    name: str | None,
    age: int | None,
    role: str | None,
    address: str | None,
    shop_id: int | None,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        UPDATE users
        SET name = COALESCE($2, name),
            age = COALESCE($3, age),
            role = COALESCE($4, role),
            address = COALESCE($5, address),
            shop_id = COALESCE($6, shop_id),
            updated_at = now()
        WHERE id = $1
        RETURNING id, name, age, role, address, shop_id
        """,
        user_id,
        name,
        age,
        role,
        address,
        shop_id,
    )


async def delete_user(db: Database, user_id: int) -> None:
    await db.execute(
        """
        DELETE FROM users
        WHERE id = $1
        """,
        user_id,
    )
