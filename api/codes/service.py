"""
Code registry business logic.

Submitting codes is an ordered, non-atomic pipeline:
1) upsert the store by domain
2) upsert every submitted code for that store
3) link each known creator handle to each stored code

Steps that already ran stay persisted if a later one fails. Lookups that
miss in step 3 are not errors; they are returned in the submission report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from core.errors import NotFoundError

from . import repository, schemas

logger = logging.getLogger(__name__)


@dataclass
class SubmitReport:
    codes: list[str] = field(default_factory=list)
    linked: list[dict[str, str]] = field(default_factory=list)
    missing_creators: list[str] = field(default_factory=list)
    missing_codes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "codes": self.codes,
            "linked": self.linked,
            "missingCreators": self.missing_creators,
            "missingCodes": self.missing_codes,
        }


def _unique(values: list[str]) -> list[str]:
    # Keeps first-seen order.
    return list(dict.fromkeys(values))


async def submit_codes(payload: schemas.SubmitCodesRequest) -> dict[str, Any]:
    codes = _unique(payload.codes)
    handles = _unique([creator.handle for creator in payload.creators or []])

    store = await repository.upsert_store(payload.domain)
    logger.info("store_upserted domain=%s store_id=%s", store["domain"], store["id"])

    stored_codes = await repository.upsert_codes(int(store["id"]), codes)
    code_ids = {str(row["code"]): int(row["id"]) for row in stored_codes}
    logger.info("codes_upserted domain=%s count=%s", store["domain"], len(code_ids))

    report = SubmitReport(codes=[code for code in codes if code in code_ids])
    report.missing_codes = [code for code in codes if code not in code_ids]

    for handle in handles:
        creator = await repository.get_creator_by_handle(handle)
        if creator is None:
            logger.info("creator_not_found handle=%s", handle)
            report.missing_creators.append(handle)
            continue

        for code in report.codes:
            await repository.upsert_creator_code(
                creator_id=int(creator["id"]),
                code_id=code_ids[code],
            )
            report.linked.append({"handle": handle, "code": code})

    if report.linked:
        logger.info("creators_linked domain=%s links=%s", store["domain"], len(report.linked))

    return {
        "success": True,
        "store": store,
        "message": "Codes added successfully",
        "report": report.to_dict(),
    }


async def list_store_codes() -> dict[str, Any]:
    stores = await repository.list_stores()
    code_rows = await repository.list_codes_for_stores([int(s["id"]) for s in stores])

    codes_by_store: dict[int, list[dict[str, Any]]] = {}
    for row in code_rows:
        codes_by_store.setdefault(int(row["store_id"]), []).append(
            {
                "code": row["code"],
                "is_verified": bool(row["is_verified"]),
                "success_count": int(row["success_count"] or 0),
            }
        )

    return {
        "stores": [
            {
                "id": store["id"],
                "domain": store["domain"],
                "codes": codes_by_store.get(int(store["id"]), []),
                "updated_at": store["updated_at"],
            }
            for store in stores
        ]
    }


async def check_codes(domain: str) -> dict[str, Any]:
    """
    Public lookup. An unknown domain is an expected answer, not an error.
    """
    store = await repository.get_store_by_domain(domain)
    if store is None:
        logger.info("check_codes_no_store domain=%s", domain)
        return {"hasCodes": False}

    rows = await repository.list_codes_with_creators(int(store["id"]))
    if not rows:
        return {"hasCodes": False}

    codes = [
        {
            "code": row["code"],
            "verified": bool(row["is_verified"]),
            "successCount": int(row["success_count"] or 0),
            "creators": list(row["creators"] or []),
        }
        for row in rows
    ]
    logger.info("check_codes domain=%s found=%s", domain, len(codes))
    return {"hasCodes": True, "codes": codes}


async def report_code(payload: schemas.ReportCodeRequest) -> dict[str, Any]:
    store = await repository.get_store_by_domain(payload.domain)
    if store is None:
        raise NotFoundError("Store not found")

    discount_code = await repository.get_code(int(store["id"]), payload.code)
    if discount_code is None:
        raise NotFoundError("Code not found")

    updated = await repository.record_code_report(int(discount_code["id"]), success=payload.success)
    if updated is None:
        raise NotFoundError("Code not found")

    logger.info(
        "code_reported domain=%s code=%s success=%s success_count=%s fail_count=%s",
        payload.domain,
        payload.code,
        payload.success,
        updated["success_count"],
        updated["fail_count"],
    )
    return {"success": True, "message": "Report recorded"}
