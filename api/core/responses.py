"""
Response envelope.

Every endpoint except `/health` answers with:

    {"status": "Success" | "Failed", "message": str, "isSuccess": bool, "data": ...}
"""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

SUCCESS = "Success"
FAILED = "Failed"


def envelope(*, status: str, message: str, is_success: bool, data: Any = None) -> dict[str, Any]:
    return {
        "status": status,
        "message": message,
        "isSuccess": is_success,
        "data": data,
    }


def success(message: str, data: Any = None, *, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope(status=SUCCESS, message=message, is_success=True, data=data)),
    )


def failure(message: str, *, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(status=FAILED, message=message, is_success=False, data=None),
    )
