"""
Pydantic request / response schemas for the finance tracker API.

Wire names are camelCase (``monthlyIncome``, ``categoryId``); Python
attribute names stay snake_case.
"""

from __future__ import annotations

import datetime as dt
import re
import uuid
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_iso_date(value):
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise ValueError("must be a date in YYYY-MM-DD format")
    return dt.date.fromisoformat(value)


def _check_password_bytes(value: str) -> str:
    # bcrypt refuses input longer than 72 bytes
    if len(value.encode()) > 72:
        raise ValueError("must be at most 72 bytes")
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)
    monthly_income: Decimal = Field(
        ..., alias="monthlyIncome", gt=0, max_digits=10, decimal_places=2
    )

    @field_validator("email")
    @classmethod
    def _email_length(cls, value: str) -> str:
        if len(value) > 255:
            raise ValueError("must be at most 255 characters")
        return value

    @field_validator("password")
    @classmethod
    def _password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def _password_bytes(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserOut(BaseModel):
    """Public view of a user.  Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    username: str
    email: str
    monthly_income: Decimal = Field(..., alias="monthlyIncome")
    created_at: Optional[dt.datetime] = Field(None, alias="createdAt")

    @field_serializer("monthly_income")
    def _income_as_number(self, value: Decimal) -> float:
        return float(value)


class AuthResponse(BaseModel):
    user: UserOut
    token: str


class UserListResponse(BaseModel):
    users: List[UserOut]


class IdentityOut(BaseModel):
    id: str
    username: str


class MeResponse(BaseModel):
    user: IdentityOut


# ═══════════════════════════════════════════════════════════════════════════════
# Expenses
# ═══════════════════════════════════════════════════════════════════════════════


class ExpenseCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category_id: uuid.UUID = Field(..., alias="categoryId")
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=255)
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def _date_format(cls, value):
        return _parse_iso_date(value)


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    user_id: uuid.UUID = Field(..., alias="userId")
    category_id: uuid.UUID = Field(..., alias="categoryId")
    amount: Decimal
    description: str
    date: dt.date
    created_at: Optional[dt.datetime] = Field(None, alias="createdAt")

    @field_serializer("amount")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)


class ExpenseResponse(BaseModel):
    expense: ExpenseOut


class ExpenseListResponse(BaseModel):
    expenses: List[ExpenseOut]


# ═══════════════════════════════════════════════════════════════════════════════
# Budgets / categories / payments (schemas only, no endpoints)
# ═══════════════════════════════════════════════════════════════════════════════


class CategoryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category_name: str = Field(..., alias="categoryName", min_length=1, max_length=50)


class BudgetCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: uuid.UUID = Field(..., alias="userId")
    category_id: uuid.UUID = Field(..., alias="categoryId")
    limit_amount: Decimal = Field(..., alias="limitAmount", gt=0, max_digits=10, decimal_places=2)


class PaymentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: uuid.UUID = Field(..., alias="userId")
    category_id: uuid.UUID = Field(..., alias="categoryId")
    payment: str = Field(..., min_length=1, max_length=50)
    due_date: dt.date = Field(..., alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date_format(cls, value):
        return _parse_iso_date(value)
