"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core import responses
from core.db import Database, get_db

from . import dependencies, schemas, service
from .security import Principal

router = APIRouter()


@router.post("/register")
async def register(
    payload: schemas.RegisterRequest,
    db: Database = Depends(get_db),
) -> JSONResponse:
    user = await service.register(db, payload)
    return responses.success("Success register user", {"user": user}, status_code=201)


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    db: Database = Depends(get_db),
) -> JSONResponse:
    data = await service.login(db, payload)
    return responses.success("Login successful", data)


@router.get("/me")
async def me(
    current_user: Principal = Depends(dependencies.get_current_user),
) -> JSONResponse:
    return responses.success("Authenticated", {"user": current_user.as_dict()})
