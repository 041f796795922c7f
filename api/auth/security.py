"""
Auth security helpers: password verification and session tokens.
"""

from __future__ import annotations

import os
import re
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import bcrypt
import jwt

from core.errors import ConfigurationError

ACCESS_TOKEN_TYPE = "access"

_DURATION_RE = re.compile(r"^(\d+)\s*([smhd]?)$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class Principal:
    """
    Identity of an authenticated caller.

    `id` is the user id; `auth_id` is the id of the credential row the
    caller logged in with.
    """

    id: int
    email: str
    username: str
    role: str
    auth_id: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "role": self.role,
        }


def parse_duration(raw: str) -> timedelta:
    """
    Parse "3600", "90s", "15m", "12h" or "7d".
    """
    match = _DURATION_RE.match((raw or "").strip().lower())
    if match is None:
        raise ConfigurationError(f"Invalid duration: {raw!r}")
    amount, unit = match.groups()
    seconds = int(amount) * _DURATION_UNITS[unit]
    if seconds <= 0:
        raise ConfigurationError(f"Duration must be positive: {raw!r}")
    return timedelta(seconds=seconds)


def jwt_secret() -> str:
    secret = os.environ.get("JWT_SECRET", "").strip()
    if not secret:
        raise ConfigurationError("JWT_SECRET is not set.")
    return secret


def jwt_algorithm() -> str:
    return os.environ.get("JWT_ALG", "HS256").strip() or "HS256"


def token_ttl() -> timedelta:
    raw = os.environ.get("JWT_EXPIRED", "").strip()
    if not raw:
        raise ConfigurationError("JWT_EXPIRED is not set.")
    return parse_duration(raw)


def validate_settings() -> None:
    """
    Fail fast at startup when the token settings are missing.
    """
    jwt_secret()
    token_ttl()


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(
    principal: Principal,
    *,
    ttl: timedelta | None,
    signing_key: str | None,
    algorithm: str = "HS256",
    issued_at: int | None = None,
) -> str:
    """
    Sign a claim set for `principal` that expires `ttl` after `issued_at`.
    """
    if not signing_key:
        raise ConfigurationError("Token signing key is not configured.")
    if ttl is None or ttl.total_seconds() <= 0:
        raise ConfigurationError("Token lifetime is not configured.")

    issued_at = now_epoch_s() if issued_at is None else issued_at
    expires_at = issued_at + int(ttl.total_seconds())

    payload = {
        "sub": str(principal.id),
        "principalId": principal.auth_id,
        "userId": principal.id,
        "username": principal.username,
        "email": principal.email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, signing_key, algorithm=algorithm)


def issue_access_token(principal: Principal) -> str:
    return build_access_token(
        principal,
        ttl=token_ttl(),
        signing_key=jwt_secret(),
        algorithm=jwt_algorithm(),
    )


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != ACCESS_TOKEN_TYPE:
        raise AuthSecurityError("Token is not an access token.")

    return payload
