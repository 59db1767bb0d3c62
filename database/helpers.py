"""
Database helper functions for users, categories and expenses.

Expected outcomes (duplicate row, missing row, storage failure) come back
as a ``Result`` instead of an exception.  Every query touching expenses is
scoped by the owning user's id.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, InternalError, NotFoundError
from core.result import Result
from database.models import Category, Expense, User

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


# ── Users ────────────────────────────────────────────────────────────


async def find_user_by_username_or_email(
    session: AsyncSession,
    username: str,
    email: str,
) -> Result[Optional[User]]:
    """Single existence check against both unique fields (exact match)."""
    try:
        result = await session.execute(
            select(User)
            .where(or_(User.username == username, User.email == email))
            .limit(1)
        )
    except SQLAlchemyError:
        logger.exception("User lookup failed for %s", username)
        return Result.failure(InternalError())
    return Result.success(result.scalar_one_or_none())


async def get_user_by_username(
    session: AsyncSession,
    username: str,
) -> Result[Optional[User]]:
    try:
        result = await session.execute(select(User).where(User.username == username))
    except SQLAlchemyError:
        logger.exception("User lookup failed for %s", username)
        return Result.failure(InternalError())
    return Result.success(result.scalar_one_or_none())


async def insert_user(
    session: AsyncSession,
    username: str,
    email: str,
    hashed_password: str,
    monthly_income: Decimal,
) -> Result[User]:
    """
    Persist a new ``User``.

    The unique constraints on username / email decide concurrent
    registrations: a violation on flush is reported as a conflict.
    """
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=email,
        hashed_password=hashed_password,
        monthly_income=monthly_income,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        logger.info("Unique constraint rejected user %s", username)
        return Result.failure(ConflictError("User already exists"))
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Could not insert user %s", username)
        return Result.failure(InternalError())
    return Result.success(user)


async def list_users(session: AsyncSession) -> Result[List[User]]:
    try:
        result = await session.execute(select(User).order_by(User.created_at.asc()))
    except SQLAlchemyError:
        logger.exception("Could not fetch users")
        return Result.failure(InternalError())
    return Result.success(list(result.scalars().all()))


# ── Categories ───────────────────────────────────────────────────────


async def get_category(
    session: AsyncSession,
    category_id: str | uuid.UUID,
) -> Result[Category]:
    try:
        result = await session.execute(
            select(Category).where(Category.id == _to_uuid(category_id))
        )
    except SQLAlchemyError:
        logger.exception("Category lookup failed for %s", category_id)
        return Result.failure(InternalError())
    category = result.scalar_one_or_none()
    if category is None:
        return Result.failure(NotFoundError("Category not found"))
    return Result.success(category)


# ── Expenses ─────────────────────────────────────────────────────────


async def list_expenses(
    session: AsyncSession,
    user_id: str | uuid.UUID,
) -> Result[List[Expense]]:
    try:
        result = await session.execute(
            select(Expense)
            .where(Expense.user_id == _to_uuid(user_id))
            .order_by(Expense.date.desc(), Expense.created_at.desc())
        )
    except SQLAlchemyError:
        logger.exception("Could not fetch expenses for user %s", user_id)
        return Result.failure(InternalError("Could not fetch expenses"))
    return Result.success(list(result.scalars().all()))


async def get_expense(
    session: AsyncSession,
    user_id: str | uuid.UUID,
    expense_id: str | uuid.UUID,
) -> Result[Expense]:
    """Return the expense only if it belongs to ``user_id``."""
    try:
        result = await session.execute(
            select(Expense).where(
                Expense.id == _to_uuid(expense_id),
                Expense.user_id == _to_uuid(user_id),
            )
        )
    except SQLAlchemyError:
        logger.exception("Could not fetch expense %s", expense_id)
        return Result.failure(InternalError("Could not fetch expense"))
    expense = result.scalar_one_or_none()
    if expense is None:
        return Result.failure(NotFoundError("Expense not found"))
    return Result.success(expense)


async def insert_expense(
    session: AsyncSession,
    user_id: str | uuid.UUID,
    category_id: str | uuid.UUID,
    amount: Decimal,
    description: str,
    expense_date: date,
) -> Result[Expense]:
    expense = Expense(
        id=uuid.uuid4(),
        user_id=_to_uuid(user_id),
        category_id=_to_uuid(category_id),
        amount=amount,
        description=description,
        date=expense_date,
    )
    session.add(expense)
    try:
        await session.flush()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Could not create expense for user %s", user_id)
        return Result.failure(InternalError("Could not create expense"))
    return Result.success(expense)


async def delete_expense(
    session: AsyncSession,
    user_id: str | uuid.UUID,
    expense_id: str | uuid.UUID,
) -> Result[None]:
    try:
        result = await session.execute(
            delete(Expense).where(
                Expense.id == _to_uuid(expense_id),
                Expense.user_id == _to_uuid(user_id),
            )
        )
        await session.flush()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Could not delete expense %s", expense_id)
        return Result.failure(InternalError("Could not delete expense"))
    if result.rowcount == 0:
        return Result.failure(NotFoundError("Expense not found"))
    return Result.success(None)
