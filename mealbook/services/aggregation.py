"""
Month aggregation - reduces raw ledger rows into dashboard figures.

Core algorithm:
1. Total groceries, meals, deposits and expenses for the month
2. Meal rate = grocery spend / meal units (zero when nobody ate)
3. Per member: meal bill from the shared rate, expense share from every
   expense the member is split into, and what they paid
4. Meal balance (deposit - meal bill) and expense balance (paid - share)
   are kept as two separate figures

All arithmetic is plain float; rounding is left to whoever renders it.
"""

from typing import Dict, Iterable, List, Sequence

from bson import ObjectId

from mealbook.models.ledger import DepositInDB, ExpenseInDB, GroceryInDB, MealInDB
from mealbook.models.user import UserInDB
from mealbook.schemas.dashboard import DashboardData, MemberStats, MemberSummary
from mealbook.schemas.ledger import ExpenseResponse, MemberExpenseResponse


def meal_rate(total_grocery: float, total_meals: float) -> float:
    """Cost of one meal unit; zero for a month without meals."""
    if total_meals > 0:
        return total_grocery / total_meals
    return 0.0


def expense_share(expense: ExpenseInDB, member_id: ObjectId) -> float:
    """The member's even share of one expense, or 0 when not split to them."""
    if member_id in expense.split_among:
        return expense.share()
    return 0.0


def expense_paid(expense: ExpenseInDB, member_id: ObjectId) -> float:
    if expense.paid_by == member_id:
        return expense.amount
    return 0.0


def _sum_meals(meals: Iterable[MealInDB]) -> float:
    return sum((m.count for m in meals), 0.0)


def _sum_amounts(rows: Iterable) -> float:
    return sum((r.amount for r in rows), 0.0)


def member_stats(
    member: UserInDB,
    meals: Sequence[MealInDB],
    deposits: Sequence[DepositInDB],
    expenses: Sequence[ExpenseInDB],
    rate: float,
) -> MemberStats:
    """Bill and balances for one member, independent of every other member."""
    member_id = member.id
    meal_units = _sum_meals(m for m in meals if m.member_id == member_id)
    deposit = _sum_amounts(d for d in deposits if d.member_id == member_id)
    share = sum((expense_share(e, member_id) for e in expenses), 0.0)
    paid = sum((expense_paid(e, member_id) for e in expenses), 0.0)

    meal_bill = meal_units * rate
    return MemberStats(
        id=str(member_id),
        name=member.name,
        meals=meal_units,
        deposit=deposit,
        meal_bill=meal_bill,
        expense_share=share,
        expense_paid=paid,
        expense_balance=paid - share,
        bill=meal_bill + share,
        balance=deposit - meal_bill
    )


def summarize_month(
    month: str,
    members: Sequence[UserInDB],
    meals: Sequence[MealInDB],
    groceries: Sequence[GroceryInDB],
    deposits: Sequence[DepositInDB],
    expenses: Sequence[ExpenseInDB],
) -> DashboardData:
    """Household summary for one month."""
    total_grocery = _sum_amounts(groceries)
    total_meals = _sum_meals(meals)
    total_deposit = _sum_amounts(deposits)
    total_expense = _sum_amounts(expenses)
    rate = meal_rate(total_grocery, total_meals)

    return DashboardData(
        month=month,
        total_grocery=total_grocery,
        total_meals=total_meals,
        total_deposit=total_deposit,
        total_expense=total_expense,
        total_balance=total_deposit - total_grocery,
        meal_rate=rate,
        member_stats=[
            member_stats(member, meals, deposits, expenses, rate)
            for member in members
        ]
    )


def summarize_member(
    member_id: ObjectId,
    rate: float,
    meals: Sequence[MealInDB],
    groceries: Sequence[GroceryInDB],
    deposits: Sequence[DepositInDB],
    expenses: Sequence[ExpenseInDB],
) -> MemberSummary:
    """Profile summary for one member.

    ``meals``, ``groceries`` and ``deposits`` are already scoped to the member;
    ``expenses`` may include rows the member is not part of. ``rate`` is the
    household meal rate for the month.
    """
    total_meals = _sum_meals(meals)
    total_deposit = _sum_amounts(deposits)
    total_meal_bill = total_meals * rate
    share = sum((expense_share(e, member_id) for e in expenses), 0.0)
    paid = sum((expense_paid(e, member_id) for e in expenses), 0.0)

    return MemberSummary(
        total_deposit=total_deposit,
        total_grocery=_sum_amounts(groceries),
        total_meals=total_meals,
        meal_rate=rate,
        total_meal_bill=total_meal_bill,
        current_balance=total_deposit - total_meal_bill,
        expense_share=share,
        expense_paid=paid,
        expense_balance=paid - share
    )


def member_expense_history(
    member_id: ObjectId,
    expenses: Sequence[ExpenseInDB],
    names: Dict[str, str],
) -> List[MemberExpenseResponse]:
    """Expenses the member paid or shares, newest first, with their side of each."""
    history = []
    for expense in expenses:
        paid = expense_paid(expense, member_id)
        share = expense_share(expense, member_id)
        if expense.paid_by != member_id and member_id not in expense.split_among:
            continue
        base = ExpenseResponse.from_row(expense, names)
        history.append(MemberExpenseResponse(
            **base.model_dump(),
            member_paid=paid,
            member_share=share,
            member_balance=paid - share
        ))
    history.sort(key=lambda e: e.date, reverse=True)
    return history
