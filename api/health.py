"""
Liveness routes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_context
from core.context import AppContext

router = APIRouter(tags=["health"])


@router.get("/")
async def root() -> Dict[str, str]:
    return {"status": "running", "message": "Hello world!"}


@router.get("/api/v1/health")
async def health(ctx: AppContext = Depends(get_context)) -> Dict[str, Any]:
    return {
        "status": "Ok",
        "upTime": round(ctx.uptime(), 3),
        "date": datetime.now(timezone.utc).isoformat(),
    }
