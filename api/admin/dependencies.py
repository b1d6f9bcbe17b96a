"""
Admin dependencies for protected FastAPI routes.

The admin key is a single shared secret (ADMIN_KEY). Callers present it as
`Authorization: Bearer <key>` or `X-Admin-Key: <key>`; either one matching
is enough.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Header

from core import settings
from core.errors import AuthorizationError, ConfigurationError

logger = logging.getLogger(__name__)


def _bearer_value(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""

    parts = raw.split(" ", 1)
    if len(parts) != 2 or parts[0].strip().lower() != "bearer":
        return ""
    return parts[1].strip()


def _matches(candidate: str, secret: str) -> bool:
    if not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))


def verify_admin_key(*, authorization: str | None, admin_key_header: str | None) -> None:
    secret = settings.admin_key()
    if not secret:
        logger.error("admin_key_not_configured")
        raise ConfigurationError("Server configuration error")

    candidates = (_bearer_value(authorization), (admin_key_header or "").strip())
    if any(_matches(candidate, secret) for candidate in candidates):
        logger.info("admin_authenticated")
        return None

    logger.warning("admin_unauthorized")
    raise AuthorizationError("Unauthorized")


async def require_admin(
    authorization: str | None = Header(default=None),
    x_admin_key: str | None = Header(default=None),
) -> None:
    verify_admin_key(authorization=authorization, admin_key_header=x_admin_key)
