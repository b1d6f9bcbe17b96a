"""
Instagram OAuth endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from sessions import cookies

from . import service

router = APIRouter()


@router.get("/oauth/instagram")
async def start_instagram_oauth() -> RedirectResponse:
    return RedirectResponse(service.authorize_redirect_url(), status_code=status.HTTP_302_FOUND)


@router.get("/oauth/callback")
async def instagram_callback(
    request: Request,
    code: str | None = Query(default=None),
    error: str | None = Query(default=None),
) -> RedirectResponse:
    creator = await service.link_creator(code=code, error=error)

    response = RedirectResponse("/oauth/success", status_code=status.HTTP_303_SEE_OTHER)
    await cookies.save_session(
        request,
        response,
        {
            "creatorId": creator["id"],
            "instagramHandle": creator["instagram_handle"],
        },
    )
    return response


@router.get("/oauth/success", response_class=HTMLResponse)
async def instagram_success(request: Request) -> HTMLResponse:
    session = await cookies.load_session(request)
    return HTMLResponse(service.render_success_page(session.get("instagramHandle")))
