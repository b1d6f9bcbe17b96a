"""
Code registry API endpoints.

- /admin/store-codes  (admin key required)
- /api/check-codes    (public)
- /api/report-code    (public)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from admin import dependencies as admin_dependencies

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/admin/store-codes",
    dependencies=[Depends(admin_dependencies.require_admin)],
)
async def submit_store_codes(request: schemas.SubmitCodesRequest) -> dict:
    logger.info(
        "store_codes_received domain=%s codes=%s creators=%s",
        request.domain,
        len(request.codes),
        len(request.creators or []),
    )
    return await service.submit_codes(request)


@router.get(
    "/admin/store-codes",
    dependencies=[Depends(admin_dependencies.require_admin)],
)
async def list_store_codes() -> dict:
    return await service.list_store_codes()


@router.post("/api/check-codes")
async def check_codes(request: schemas.CheckCodesRequest) -> dict:
    return await service.check_codes(request.domain)


@router.post("/api/report-code")
async def report_code(request: schemas.ReportCodeRequest) -> dict:
    return await service.report_code(request)
