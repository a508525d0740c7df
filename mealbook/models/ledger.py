"""
Ledger models - the four month-bucketed collections a household writes to.

Design principles:
- Every row carries ``month``, the ``YYYY-MM`` prefix of its ``date``
- ``month`` is derived by the write path, never trusted from the client
- Member references are ObjectIds into ``users``
- Amounts are plain floats; no rounding before presentation
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from mealbook.models.base import MongoModel, PyObjectId
from mealbook.models.user import TrimmedStr


def _reject_duplicates(member_ids) -> None:
    seen = set()
    for member_id in member_ids:
        if member_id in seen:
            raise ValueError(f"Member {member_id} is listed more than once")
        seen.add(member_id)


class LedgerRow(MongoModel):
    date: datetime
    month: str


# Meals

class MealInDB(LedgerRow):
    """Meal units eaten by one member on one day. Unique per (date, member_id)."""
    member_id: PyObjectId
    count: float


class MealCount(BaseModel):
    member_id: PyObjectId
    count: float = Field(..., allow_inf_nan=False)


class MealBatch(BaseModel):
    """One day's meal counts; a count of zero or less removes the member's row."""
    date: datetime
    meals: List[MealCount] = Field(..., min_length=1)

    @field_validator("meals")
    @classmethod
    def one_entry_per_member(cls, v):
        _reject_duplicates(entry.member_id for entry in v)
        return v


class MealUpdate(BaseModel):
    id: str
    date: Optional[datetime] = None
    member_id: Optional[PyObjectId] = None
    count: Optional[float] = Field(None, gt=0, allow_inf_nan=False)


# Groceries

class GroceryInDB(LedgerRow):
    done_by: PyObjectId
    added_by: Optional[PyObjectId] = None
    description: str
    amount: float
    note: Optional[str] = None


class GroceryCreate(BaseModel):
    date: datetime
    done_by: PyObjectId
    description: TrimmedStr
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    note: Optional[str] = None


class GroceryUpdate(BaseModel):
    id: str
    date: Optional[datetime] = None
    done_by: Optional[PyObjectId] = None
    description: Optional[TrimmedStr] = None
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    note: Optional[str] = None


# Expenses

class ExpenseInDB(LedgerRow):
    """Shared expense paid by one member and split evenly among ``split_among``."""
    paid_by: PyObjectId
    split_among: List[PyObjectId]
    description: str
    amount: float
    note: Optional[str] = None

    def share(self) -> float:
        """Even per-member share; an empty split set owes nothing."""
        if not self.split_among:
            return 0.0
        return self.amount / len(self.split_among)


class ExpenseCreate(BaseModel):
    date: datetime
    paid_by: PyObjectId
    split_among: List[PyObjectId] = Field(..., min_length=1)
    description: TrimmedStr
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    note: Optional[str] = None

    @field_validator("split_among")
    @classmethod
    def split_is_a_set(cls, v):
        _reject_duplicates(v)
        return v


class ExpenseUpdate(BaseModel):
    id: str
    date: Optional[datetime] = None
    paid_by: Optional[PyObjectId] = None
    split_among: Optional[List[PyObjectId]] = Field(None, min_length=1)
    description: Optional[TrimmedStr] = None
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    note: Optional[str] = None

    @field_validator("split_among")
    @classmethod
    def split_is_a_set(cls, v):
        if v is not None:
            _reject_duplicates(v)
        return v


# Deposits

class DepositInDB(LedgerRow):
    member_id: PyObjectId
    amount: float


class DepositCreate(BaseModel):
    date: datetime
    member_id: PyObjectId
    amount: float = Field(..., ge=0, allow_inf_nan=False)


class DepositUpdate(BaseModel):
    id: str
    date: Optional[datetime] = None
    member_id: Optional[PyObjectId] = None
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
