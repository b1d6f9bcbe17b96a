"""
Account business logic (signup / login / logout).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from core import settings
from core.errors import BadRequestError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        email=str(user_row["email"]),
        created_at=user_row["created_at"],
    )


async def _issue_session(user_row: dict) -> schemas.SessionResponse:
    user_id = int(user_row["id"])
    raw_refresh_token = security.build_refresh_token()
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days())

    await repository.insert_refresh_token(
        user_id=user_id,
        token_hash=security.hash_refresh_token(raw_refresh_token),
        expires_at=expires_at,
    )
    return schemas.SessionResponse(
        access_token=security.build_access_token(user_id=user_id, email=str(user_row["email"])),
        refresh_token=raw_refresh_token,
        expires_in=security.access_token_ttl_s(),
    )


async def signup(payload: schemas.SignupRequest) -> schemas.SignupResponse:
    password_hash = security.hash_password(payload.password)
    user_row = await repository.create_user(email=payload.email, password_hash=password_hash)
    if user_row is None:
        raise BadRequestError("Email is already registered")

    logger.info("user_signed_up user_id=%s", user_row["id"])
    return schemas.SignupResponse(user=_to_user_response(user_row), message="Account created")


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None or not bool(user_row.get("is_active", False)):
        raise BadRequestError("Invalid email or password")

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        raise BadRequestError("Invalid email or password")

    session = await _issue_session(user_row)
    logger.info("user_logged_in user_id=%s", user_row["id"])
    return schemas.LoginResponse(user=_to_user_response(user_row), session=session)


async def logout(payload: schemas.LogoutRequest) -> schemas.MessageResponse:
    # Stateless access tokens simply expire; only a given refresh token is revoked.
    refresh_token = (payload.refresh_token or "").strip()
    if refresh_token:
        await repository.revoke_refresh_token(security.hash_refresh_token(refresh_token))
    return schemas.MessageResponse(message="Logged out successfully")
