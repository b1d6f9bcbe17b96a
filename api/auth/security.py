"""
Password hashing and token minting for email/password accounts.
"""

from __future__ import annotations

import hashlib
import secrets
import time

import bcrypt
import jwt

from core import settings


class AuthSecurityError(RuntimeError):
    pass


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


def access_token_ttl_s() -> int:
    return settings.access_token_expire_minutes() * 60


def build_access_token(*, user_id: int, email: str) -> str:
    issued_at = int(time.time())
    payload = {
        "sub": str(user_id),
        "email": email,
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + access_token_ttl_s(),
    }
    return jwt.encode(payload, settings.jwt_secret(), algorithm=settings.jwt_algorithm())


def build_refresh_token() -> str:
    # URL-safe random string for client storage/transmission.
    return secrets.token_urlsafe(48)


def hash_refresh_token(raw_refresh_token: str) -> str:
    token = (raw_refresh_token or "").encode("utf-8")
    if not token:
        raise AuthSecurityError("Refresh token is empty.")
    return hashlib.sha256(token).hexdigest()
