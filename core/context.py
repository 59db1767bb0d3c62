"""
Application context — everything a request needs that outlives the request.

Built once by ``create_app`` and stored on ``app.state.ctx``; flows and
dependencies receive it explicitly instead of importing module globals.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from auth.password import PasswordHasher
from auth.tokens import TokenService
from config.settings import Settings
from database.session import build_engine, build_session_factory


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    hasher: PasswordHasher
    tokens: TokenService
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
            tokens=TokenService(
                secret=settings.jwt_secret,
                algorithm=settings.jwt_algorithm,
                expiry_seconds=settings.jwt_expiry_seconds,
            ),
        )

    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    async def close(self) -> None:
        await self.engine.dispose()
