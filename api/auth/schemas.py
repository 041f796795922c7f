"""
Auth API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

# bcrypt only hashes the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=8, max_length=128)
    age: int | None = Field(default=None, ge=0)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)
