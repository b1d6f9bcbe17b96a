"""
Instagram HTTP client helpers.

Used endpoints:
- GET  https://api.instagram.com/oauth/authorize      (browser redirect only)
- POST https://api.instagram.com/oauth/access_token   -> {"access_token": "...", "user_id": ...}
- GET  https://graph.instagram.com/me?fields=id,username -> {"id": "...", "username": "..."}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

AUTHORIZE_URL = "https://api.instagram.com/oauth/authorize"
ACCESS_TOKEN_URL = "https://api.instagram.com/oauth/access_token"
PROFILE_URL = "https://graph.instagram.com/me"
SCOPES = ("user_profile", "user_media")


# Instagram failures are explicit and separable from other runtime errors.
class InstagramError(RuntimeError):
    pass


@dataclass(frozen=True)
class InstagramProfile:
    instagram_id: str
    username: str


def _json_body(resp: httpx.Response) -> dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as exc:
        raise InstagramError("Instagram returned a non-JSON body.") from exc
    if not isinstance(data, dict):
        raise InstagramError("Instagram returned an unexpected JSON body.")
    return data


def authorize_url(*, client_id: str, redirect_uri: str) -> str:
    query = urlencode(
        {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "scope": ",".join(SCOPES),
            "response_type": "code",
        }
    )
    return f"{AUTHORIZE_URL}?{query}"


async def exchange_code(
    *,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    timeout_s: float = 15.0,
) -> str:
    """
    Trade an authorization code for a short-lived access token.
    """
    form = {
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": "authorization_code",
        "redirect_uri": redirect_uri,
        "code": code,
    }
    try:
        async with httpx.AsyncClient(timeout=timeout_s) as client:
            resp = await client.post(ACCESS_TOKEN_URL, data=form)
    except httpx.HTTPError as exc:
        raise InstagramError(f"Instagram token exchange failed: {exc}") from exc

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise InstagramError(f"Instagram token exchange failed: {resp.status_code} {body}")

    data = _json_body(resp)
    token = data.get("access_token")
    if not isinstance(token, str) or not token:
        raise InstagramError("Instagram returned no access token.")
    return token


async def fetch_profile(*, access_token: str, timeout_s: float = 15.0) -> InstagramProfile:
    params = {"fields": "id,username", "access_token": access_token}
    try:
        async with httpx.AsyncClient(timeout=timeout_s) as client:
            resp = await client.get(PROFILE_URL, params=params)
    except httpx.HTTPError as exc:
        raise InstagramError(f"Instagram profile request failed: {exc}") from exc

    if resp.status_code != 200:
        body = resp.text[:500]
        raise InstagramError(f"Instagram profile request failed: {resp.status_code} {body}")

    data = _json_body(resp)
    instagram_id = str(data.get("id") or "").strip()
    username = str(data.get("username") or "").strip()
    if not instagram_id or not username:
        raise InstagramError("Instagram profile is missing id or username.")
    return InstagramProfile(instagram_id=instagram_id, username=username)
