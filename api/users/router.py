"""
User API endpoints.

Accounts are created through `/register`; there is no POST here.

PUT is a partial update: omitted or null fields keep their stored values, so
`address` and `shopId` cannot be cleared through it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from auth import dependencies as auth_dependencies
from auth.security import Principal
from core import responses
from core.db import MAX_ID, Database, get_db
from core.pagination import paginate

from . import schemas, service

router = APIRouter()


@router.get("/users")
async def list_users(
    name: str | None = Query(default=None),
    age: str | None = Query(default=None),
    role: str | None = Query(default=None),
    address: str | None = Query(default=None),
    shop_id: str | None = Query(default=None, alias="shopId"),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    result = await service.list_users(
        db,
        {"name": name, "age": age, "role": role, "address": address, "shopId": shop_id},
        paginate(page, limit),
    )
    return responses.success(
        "Success get users data",
        {
            "totalData": result.total_count,
            "totalPages": result.total_pages,
            "currentPage": result.current_page,
            "users": result.items,
        },
    )


@router.get("/users/{user_id}")
async def get_user(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    user = await service.get_user(db, user_id)
    return responses.success("Success get user data", {"user": user})


@router.put("/users/{user_id}")
async def update_user(
    payload: schemas.UserUpdate,
    user_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    user = await service.update_user(db, user_id, payload)
    return responses.success("Success update user", {"user": user})


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    await service.delete_user(db, user_id)
    return responses.success("Success delete user")
