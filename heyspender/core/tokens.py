"""JWT helpers for access and email verification tokens."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Optional

from jose import JWTError, jwt

from heyspender.core.clock import utcnow
from heyspender.core.config import get_settings

ACCESS_PURPOSE = "access"
VERIFY_PURPOSE = "verify_email"


class TokenError(Exception):
    """Raised when a token cannot be decoded or has the wrong purpose."""


def create_access_token(account_id: str, username: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": account_id,
        "username": username,
        "role": role,
        "purpose": ACCESS_PURPOSE,
        "exp": utcnow() + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_verification_token(account_id: str, email: str) -> str:
    settings = get_settings()
    payload = {
        "sub": account_id,
        "email": email,
        "purpose": VERIFY_PURPOSE,
        "exp": utcnow() + timedelta(minutes=settings.security.verification_token_expire_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str, purpose: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise TokenError(str(exc)) from exc
    if payload.get("purpose") != purpose or not payload.get("sub"):
        raise TokenError("token purpose mismatch")
    return payload


__all__ = [
    "TokenError",
    "create_access_token",
    "create_verification_token",
    "decode_token",
    "ACCESS_PURPOSE",
    "VERIFY_PURPOSE",
]
