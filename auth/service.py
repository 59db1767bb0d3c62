"""
Registration and login flows.

Both return a ``Result[AuthResult]``; the routes unwrap it.  bcrypt runs in
the threadpool so a slow hash never stalls other requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import jwt
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from core.context import AppContext
from core.errors import AuthenticationError, ConflictError, InternalError
from core.result import Result
from database.helpers import find_user_by_username_or_email, get_user_by_username, insert_user
from database.models import User
from utils.schemas import LoginRequest, RegisterRequest, UserOut

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthResult:
    user: UserOut
    token: str

    def to_response(self) -> dict:
        return {"user": self.user, "token": self.token}


def _issue(ctx: AppContext, user: User) -> Result[AuthResult]:
    try:
        token = ctx.tokens.issue(str(user.id), user.username)
    except jwt.PyJWTError:
        logger.exception("Could not sign token for user %s", user.id)
        return Result.failure(InternalError())
    return Result.success(AuthResult(user=UserOut.model_validate(user), token=token))


async def register_user(
    ctx: AppContext,
    session: AsyncSession,
    req: RegisterRequest,
) -> Result[AuthResult]:
    """Create a user unless the username or email is already taken."""
    existing = await find_user_by_username_or_email(session, req.username, req.email)
    if not existing.ok:
        return Result.failure(existing.error)
    if existing.value is not None:
        logger.info("Registration rejected, %s / %s already taken", req.username, req.email)
        return Result.failure(ConflictError("User already exists"))

    try:
        hashed = await run_in_threadpool(ctx.hasher.hash, req.password)
    except (ValueError, TypeError):
        logger.exception("Password hashing failed for %s", req.username)
        return Result.failure(InternalError("Could not register user"))

    created = await insert_user(
        session,
        username=req.username,
        email=req.email,
        hashed_password=hashed,
        monthly_income=req.monthly_income,
    )
    if not created.ok:
        return Result.failure(created.error)

    user = created.value
    logger.info("Registered user %s (%s)", user.username, user.id)
    return _issue(ctx, user)


async def authenticate_user(
    ctx: AppContext,
    session: AsyncSession,
    req: LoginRequest,
) -> Result[AuthResult]:
    """
    Log in by username + password.

    Unknown user and wrong password produce the same error, and both pay
    for one bcrypt verification.
    """
    found = await get_user_by_username(session, req.username)
    if not found.ok:
        return Result.failure(found.error)

    user = found.value
    try:
        if user is None:
            await run_in_threadpool(ctx.hasher.verify_dummy, req.password)
            matched = False
        else:
            matched = await run_in_threadpool(
                ctx.hasher.verify, req.password, user.hashed_password
            )
    except (ValueError, TypeError):
        logger.exception("Password verification failed for %s", req.username)
        return Result.failure(InternalError())

    if user is None:
        logger.info("Login failed for unknown user %s", req.username)
        return Result.failure(AuthenticationError(INVALID_CREDENTIALS))

    if not matched:
        logger.info("Login failed for %s (%s)", user.username, user.id)
        return Result.failure(AuthenticationError(INVALID_CREDENTIALS))

    logger.info("Login: %s (%s)", user.username, user.id)
    return _issue(ctx, user)
