"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.context import AppContext
from database.session import session_scope


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


async def db_session(
    ctx: AppContext = Depends(get_context),
) -> AsyncGenerator[AsyncSession, None]:
    """One session per request: committed on success, rolled back on error."""
    async with session_scope(ctx.session_factory) as session:
        yield session
