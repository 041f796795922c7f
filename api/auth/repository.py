"""
Auth persistence helpers.

Credentials live in `auths` (email + password hash), profile data in `users`.
"""

from __future__ import annotations

from core.db import Database

_CREDENTIAL_COLUMNS = """
    a.id AS auth_id,
    a.email,
    a.password_hash,
    u.id AS user_id,
    u.name,
    u.role
"""


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_credentials_by_email(db: Database, email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_CREDENTIAL_COLUMNS}
        FROM auths a
        JOIN users u ON u.id = a.user_id
        WHERE lower(a.email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_credentials_by_user_id(db: Database, user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_CREDENTIAL_COLUMNS}
        FROM auths a
        JOIN users u ON u.id = a.user_id
        WHERE u.id = $1
        ORDER BY a.id
        LIMIT 1
        """,
        user_id,
    )


async def create_account(
    db: Database,
    *,
    name: str,
    email: str,
    password_hash: str,
    role: str,
    age: int | None = None,
    address: str | None = None,
) -> dict:
    # One statement so the user and its credentials are created atomically.
    row = await db.fetch_one(
        """
        WITH new_user AS (
            INSERT INTO users (name, age, role, address)
            VALUES ($1, $2, $3, $4)
            RETURNING id, name, role
        ),
        new_auth AS (
            INSERT INTO auths (email, password_hash, user_id)
            SELECT $5, $6, id FROM new_user
            RETURNING id, email, user_id
        )
        SELECT new_user.id, new_user.name, new_user.role, new_auth.email
        FROM new_user
        JOIN new_auth ON new_auth.user_id = new_user.id
        """,
        name,
        age,
        role,
        address,
        normalize_email(email),
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create account.")
    return row
