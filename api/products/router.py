"""
Product API endpoints.

PUT is a partial update: omitted or null fields keep their stored values, so
`images` cannot be cleared through it.
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


@router.get("/products")
async def list_products(
    product_name: str | None = Query(default=None, alias="productName"),
    stock: str | None = Query(default=None),
    shop_name: str | None = Query(default=None, alias="shopName"),
    limit: str | None = Query(default=None),
    page: str | None = Query(default=None),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    result = await service.list_products(
        db,
        {"productName": product_name, "stock": stock, "shopName": shop_name},
        paginate(page, limit),
    )
    return responses.success(
        "Success get products data",
        {
            "totalData": result.total_count,
            "totalPages": result.total_pages,
            "currentPage": result.current_page,
            "products": result.items,
        },
    )


@router.get("/products/{product_id}")
async def get_product(
    product_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    product = await service.get_product(db, product_id)
    return responses.success("Success get product data", {"product": product})


@router.post("/products")
async def create_product(
    payload: schemas.ProductCreate,
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    product = await service.create_product(db, payload)
    return responses.success("Success create new product", {"newProduct": product}, status_code=201)


@router.put("/products/{product_id}")
async def update_product(
    payload: schemas.ProductUpdate,
    product_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    product = await service.update_product(db, product_id, payload)
    return responses.success("Success update product", {"product": product})


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: int = Path(..., ge=1, le=MAX_ID),
    db: Database = Depends(get_db),
    _: Principal = Depends(auth_dependencies.get_current_user),
) -> JSONResponse:
    await service.delete_product(db, product_id)
    return responses.success("Success delete product")
