"""
Shop API endpoints.

PUT is a partial update: omitted or null fields keep their stored values.
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


@router.get("/shops")
async def list_shops(
    shop_name: str | None = Query(default=None, alias="shopName"),
    admin_email: str | None = Query(default=None, alias="adminEmail"),
    product_name: str | None = Query(default=None, alias="productName"),
    stock: str | None = Query(default=None),
    user_name: str | None = Query(default=None, alias="userName"),
    size: str | None = Query(default=None),
    page: str | None = Query(default=None),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    result = await service.list_shops(
        db,
        {
            "shopName": shop_name,
            "adminEmail": admin_email,
            "productName": product_name,
            "stock": stock,
            "userName": user_name,
        },
        paginate(page, size),
    )
    return responses.success(
        "Successfully retrieved shop data",
        {
            "totalData": result.total_count,
            "shops": result.items,
            "pagination": {
                "page": result.current_page,
                "size": result.size,
                "totalPages": result.total_pages,
            },
        },
    )


@router.get("/shops/{shop_id}")
async def get_shop(
    shop_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    shop = await service.get_shop(db, shop_id)
    return responses.success("Successfully retrieved shop data", {"shop": shop})


@router.post("/shops")
async def create_shop(
    payload: schemas.ShopCreate,
    db: Database = Depends(get_db),
    current_user: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    shop = await service.create_shop(db, payload, owner=current_user)
    return responses.success("Successfully created new Shop", {"newShop": shop}, status_code=201)


@router.put("/shops/{shop_id}")
async def update_shop(
    payload: schemas.ShopUpdate,
    shop_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    shop = await service.update_shop(db, shop_id, payload)
    return responses.success("Successfully updated shop", {"shop": shop})


@router.delete("/shops/{shop_id}")
async def delete_shop(
    shop_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    await service.delete_shop(db, shop_id)
    return responses.success("Successfully deleted shop")
