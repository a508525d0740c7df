from typing import List

from pydantic import BaseModel, Field

from mealbook.schemas.ledger import (
    DepositResponse,
    GroceryResponse,
    MealResponse,
    MemberExpenseResponse,
    MemberRef,
)


class MemberStats(BaseModel):
    id: str
    name: str
    meals: float = 0.0
    deposit: float = 0.0
    meal_bill: float = 0.0
    expense_share: float = 0.0
    expense_paid: float = 0.0
    expense_balance: float = 0.0
    bill: float = 0.0
    # Meal balance only; the expense balance is reported separately.
    balance: float = 0.0


class DashboardData(BaseModel):
    month: str
    total_grocery: float = 0.0
    total_meals: float = 0.0
    total_deposit: float = 0.0
    total_expense: float = 0.0
    total_balance: float = 0.0
    meal_rate: float = 0.0
    member_stats: List[MemberStats] = Field(default_factory=list)


class MemberSummary(BaseModel):
    total_deposit: float = 0.0
    total_grocery: float = 0.0
    total_meals: float = 0.0
    meal_rate: float = 0.0
    total_meal_bill: float = 0.0
    current_balance: float = 0.0
    expense_share: float = 0.0
    expense_paid: float = 0.0
    expense_balance: float = 0.0


class MemberHistory(BaseModel):
    deposits: List[DepositResponse] = Field(default_factory=list)
    meals: List[MealResponse] = Field(default_factory=list)
    groceries: List[GroceryResponse] = Field(default_factory=list)
    expenses: List[MemberExpenseResponse] = Field(default_factory=list)


class MemberProfileData(BaseModel):
    month: str
    member: MemberRef
    summary: MemberSummary
    history: MemberHistory
