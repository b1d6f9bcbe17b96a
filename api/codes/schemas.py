"""
Code registry API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreatorRef(BaseModel):
    handle: str = Field(..., min_length=1, max_length=100)


class SubmitCodesRequest(BaseModel):
    domain: str = Field(..., min_length=1, max_length=253)
    codes: list[str]
    creators: list[CreatorRef] | None = None


class CheckCodesRequest(BaseModel):
    domain: str = Field(..., min_length=1, max_length=253)


class ReportCodeRequest(BaseModel):
    domain: str = Field(..., min_length=1, max_length=253)
    code: str = Field(..., min_length=1)
    success: bool
