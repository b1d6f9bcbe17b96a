"""
Email/password account endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter(prefix="/api/auth")


@router.post("/signup", response_model=schemas.SignupResponse)
async def signup(request: schemas.SignupRequest) -> schemas.SignupResponse:
    return await service.signup(request)


@router.post("/login", response_model=schemas.LoginResponse)
async def login(request: schemas.LoginRequest) -> schemas.LoginResponse:
    return await service.login(request)


@router.post("/logout", response_model=schemas.MessageResponse)
async def logout(request: schemas.LogoutRequest | None = None) -> schemas.MessageResponse:
    return await service.logout(request or schemas.LogoutRequest())
