"""
Personal finance tracker API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.expenses import router as expenses_router
from api.health import router as health_router
from api.middleware import register_middleware
from auth.routes import router as auth_router
from config.settings import Settings
from core.context import AppContext
from database.models import init_models

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    ctx = AppContext.from_settings(settings)

    app = FastAPI(
        title="Finance Tracker API",
        version="1.0.0",
        description="Users, authentication and expenses for personal finance tracking.",
    )
    app.state.ctx = ctx

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app, expose_stack=not settings.is_production)

    # Routes
    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(expenses_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def on_startup():
        await init_models(ctx.engine)
        logger.info("App is running in %s mode", settings.environment)

    @app.on_event("shutdown")
    async def on_shutdown():
        await ctx.close()

    return app


if __name__ == "__main__":
    _settings = Settings()
    configure_logging(_settings)
    uvicorn.run(
        create_app(_settings),
        host=_settings.host,
        port=_settings.port,
        log_level="debug" if _settings.debug else "info",
    )
