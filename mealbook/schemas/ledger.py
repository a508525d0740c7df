"""Ledger row responses with member references resolved to names."""
from datetime import datetime
from typing import Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel

from mealbook.models.ledger import DepositInDB, ExpenseInDB, GroceryInDB, MealInDB


class MemberRef(BaseModel):
    id: str
    name: Optional[str] = None

    @classmethod
    def resolve(cls, member_id: ObjectId, names: Dict[str, str]) -> "MemberRef":
        key = str(member_id)
        return cls(id=key, name=names.get(key))


class MealResponse(BaseModel):
    id: str
    date: datetime
    month: str
    member: MemberRef
    count: float

    @classmethod
    def from_row(cls, row: MealInDB, names: Dict[str, str]) -> "MealResponse":
        return cls(
            id=str(row.id),
            date=row.date,
            month=row.month,
            member=MemberRef.resolve(row.member_id, names),
            count=row.count
        )


class GroceryResponse(BaseModel):
    id: str
    date: datetime
    month: str
    done_by: MemberRef
    added_by: Optional[MemberRef] = None
    description: str
    amount: float
    note: Optional[str] = None

    @classmethod
    def from_row(cls, row: GroceryInDB, names: Dict[str, str]) -> "GroceryResponse":
        return cls(
            id=str(row.id),
            date=row.date,
            month=row.month,
            done_by=MemberRef.resolve(row.done_by, names),
            added_by=MemberRef.resolve(row.added_by, names) if row.added_by else None,
            description=row.description,
            amount=row.amount,
            note=row.note
        )


class ExpenseResponse(BaseModel):
    id: str
    date: datetime
    month: str
    paid_by: MemberRef
    split_among: List[MemberRef]
    description: str
    amount: float
    note: Optional[str] = None

    @classmethod
    def from_row(cls, row: ExpenseInDB, names: Dict[str, str]) -> "ExpenseResponse":
        return cls(
            id=str(row.id),
            date=row.date,
            month=row.month,
            paid_by=MemberRef.resolve(row.paid_by, names),
            split_among=[MemberRef.resolve(m, names) for m in row.split_among],
            description=row.description,
            amount=row.amount,
            note=row.note
        )


class MemberExpenseResponse(ExpenseResponse):
    """An expense seen from one member: what they paid, their share, and the net."""
    member_paid: float
    member_share: float
    member_balance: float


class DepositResponse(BaseModel):
    id: str
    date: datetime
    month: str
    member: MemberRef
    amount: float

    @classmethod
    def from_row(cls, row: DepositInDB, names: Dict[str, str]) -> "DepositResponse":
        return cls(
            id=str(row.id),
            date=row.date,
            month=row.month,
            member=MemberRef.resolve(row.member_id, names),
            amount=row.amount
        )


class MealBatchResult(BaseModel):
    date: datetime
    month: str
    upserted: int
    removed: int
