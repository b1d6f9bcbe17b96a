"""
Instagram OAuth orchestration.

Flow:
1) /oauth/instagram redirects the browser to Instagram's authorize page
2) /oauth/callback trades the code for an access token
3) the token is used to read the profile (id + username)
4) the creator row is upserted by Instagram id
5) the session remembers the creator and the browser lands on /oauth/success

Any failure in 2-4 becomes a generic "Authentication failed"; the upstream
detail is logged only. No retries: a replayed code is rejected by Instagram.
"""

from __future__ import annotations

import html
import logging
from typing import Any

import asyncpg

from core import instagram, settings
from core.errors import ConfigurationError, ServiceError, UpstreamError

from . import repository

logger = logging.getLogger(__name__)

SUCCESS_PAGE = """
<html>
  <head><title>Connected!</title></head>
  <body style="font-family: system-ui; max-width: 600px; margin: 100px auto; text-align: center;">
    <h1>&#x2705; Instagram Connected!</h1>
    <p>Handle: @{handle}</p>
    <p>You can now manage your discount codes.</p>
  </body>
</html>
"""


def authorize_redirect_url() -> str:
    client_id = settings.instagram_client_id()
    if not client_id:
        logger.error("instagram_oauth_not_configured missing=IG_CLIENT_ID")
        raise ConfigurationError("Instagram OAuth not configured")
    return instagram.authorize_url(
        client_id=client_id,
        redirect_uri=settings.instagram_redirect_uri(),
    )


async def link_creator(*, code: str | None, error: str | None = None) -> dict[str, Any]:
    """
    Run the exchanging step and persist the creator. Returns the creator row.
    """
    client_id = settings.instagram_client_id()
    client_secret = settings.instagram_client_secret()
    if not client_id or not client_secret:
        logger.error("instagram_oauth_not_configured missing=IG_CLIENT_ID/IG_CLIENT_SECRET")
        raise ConfigurationError("Instagram OAuth not configured")

    try:
        if error:
            raise instagram.InstagramError(f"Instagram denied authorization: {error}")
        if not (code or "").strip():
            raise instagram.InstagramError("Callback is missing the authorization code.")

        timeout_s = settings.instagram_timeout_s()
        access_token = await instagram.exchange_code(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=settings.instagram_redirect_uri(),
            code=code.strip(),
            timeout_s=timeout_s,
        )
        profile = await instagram.fetch_profile(access_token=access_token, timeout_s=timeout_s)
        creator = await repository.upsert_creator(
            instagram_id=profile.instagram_id,
            instagram_handle=profile.username,
            access_token=access_token,
        )
    except (instagram.InstagramError, asyncpg.PostgresError, ServiceError, OSError) as exc:
        logger.exception("oauth_failed error=%s", exc)
        raise UpstreamError("Authentication failed") from exc

    logger.info("creator_linked creator_id=%s handle=%s", creator["id"], creator["instagram_handle"])
    return creator


def render_success_page(handle: str | None) -> str:
    return SUCCESS_PAGE.format(handle=html.escape(handle or "Unknown"))
