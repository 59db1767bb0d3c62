"""
Auth API routes — register, login, users, me.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_context
from auth.dependencies import get_current_identity
from auth.service import authenticate_user, register_user
from auth.tokens import TokenIdentity
from core.context import AppContext
from database.helpers import list_users
from utils.schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserListResponse,
    UserOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    ctx: AppContext = Depends(get_context),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Register a new user and return it with a fresh token."""
    result = await register_user(ctx, session, req)
    return result.unwrap().to_response()


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    ctx: AppContext = Depends(get_context),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Login with username + password."""
    result = await authenticate_user(ctx, session, req)
    return result.unwrap().to_response()


@router.get("/users", response_model=UserListResponse)
async def users(
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """List every user.  Administrative/debug endpoint, token required."""
    logger.debug("User list requested by %s", identity.username)
    rows = (await list_users(session)).unwrap()
    return {"users": [UserOut.model_validate(u) for u in rows]}


@router.get("/me", response_model=MeResponse)
async def me(identity: TokenIdentity = Depends(get_current_identity)) -> Dict[str, Any]:
    return {"user": {"id": identity.user_id, "username": identity.username}}
