"""
Expense routes.  Every route requires a bearer token and only ever sees
the caller's own expenses.

Route prefix: /expenses
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session
from auth.dependencies import AuthenticatedRoute, get_current_identity
from auth.tokens import TokenIdentity
from database.helpers import (
    delete_expense,
    get_category,
    get_expense,
    insert_expense,
    list_expenses,
)
from utils.schemas import ExpenseCreate, ExpenseListResponse, ExpenseOut, ExpenseResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"], route_class=AuthenticatedRoute)


@router.get("", response_model=ExpenseListResponse)
async def get_expenses(
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    rows = (await list_expenses(session, identity.user_id)).unwrap()
    return {"expenses": [ExpenseOut.model_validate(e) for e in rows]}


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    req: ExpenseCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Create an expense owned by the caller in an existing category."""
    (await get_category(session, req.category_id)).unwrap()
    expense = (
        await insert_expense(
            session,
            user_id=identity.user_id,
            category_id=req.category_id,
            amount=req.amount,
            description=req.description,
            expense_date=req.date,
        )
    ).unwrap()
    logger.info("Expense %s created for %s", expense.id, identity.username)
    return {"expense": ExpenseOut.model_validate(expense)}


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense_by_id(
    expense_id: uuid.UUID,
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    expense = (await get_expense(session, identity.user_id, expense_id)).unwrap()
    return {"expense": ExpenseOut.model_validate(expense)}


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_by_id(
    expense_id: uuid.UUID,
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Response:
    (await delete_expense(session, identity.user_id, expense_id)).unwrap()
    logger.info("Expense %s deleted by %s", expense_id, identity.username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
