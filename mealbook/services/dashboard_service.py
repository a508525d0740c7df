import asyncio
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from mealbook.core.errors import NotFoundError
from mealbook.repositories.deposit_repo import DepositRepository
from mealbook.repositories.expense_repo import ExpenseRepository
from mealbook.repositories.grocery_repo import GroceryRepository
from mealbook.repositories.meal_repo import MealRepository
from mealbook.repositories.settings_repo import SettingsRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.dashboard import DashboardData, MemberHistory, MemberProfileData
from mealbook.schemas.ledger import DepositResponse, GroceryResponse, MealResponse, MemberRef
from mealbook.services import aggregation


class DashboardService:
    """Loads a month's ledger rows and hands them to the aggregation functions."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = UserRepository(db)
        self.meals = MealRepository(db)
        self.groceries = GroceryRepository(db)
        self.deposits = DepositRepository(db)
        self.expenses = ExpenseRepository(db)
        self.settings = SettingsRepository(db)

    async def resolve_month(self, month: Optional[str]) -> str:
        """The requested month, or the household's current month."""
        if month:
            return month
        current = await self.settings.get_settings()
        return current.current_month

    async def summarize_month(self, month: str) -> DashboardData:
        members, meals, groceries, deposits, expenses = await asyncio.gather(
            self.users.list_active_members(),
            self.meals.list_rows(month),
            self.groceries.list_rows(month),
            self.deposits.list_rows(month),
            self.expenses.list_rows(month),
        )
        return aggregation.summarize_month(month, members, meals, groceries, deposits, expenses)

    async def summarize_member(self, member_id: str, month: str) -> MemberProfileData:
        member = await self.users.get_user_by_id(member_id)
        if member is None:
            raise NotFoundError("Member not found")
        oid = member.id

        meals, groceries, deposits, expenses, all_meals, all_groceries = await asyncio.gather(
            self.meals.list_rows(month, member_id=oid),
            self.groceries.list_rows(month, done_by=oid),
            self.deposits.list_rows(month, member_id=oid),
            self.expenses.list_involving(oid, month),
            self.meals.list_rows(month),
            self.groceries.list_rows(month),
        )

        rate = aggregation.meal_rate(
            sum((g.amount for g in all_groceries), 0.0),
            sum((m.count for m in all_meals), 0.0)
        )
        summary = aggregation.summarize_member(oid, rate, meals, groceries, deposits, expenses)

        referenced = {oid}
        for g in groceries:
            referenced.add(g.done_by)
            if g.added_by:
                referenced.add(g.added_by)
        for e in expenses:
            referenced.add(e.paid_by)
            referenced.update(e.split_among)
        names = await self.users.get_names(referenced)
        names[str(oid)] = member.name

        return MemberProfileData(
            month=month,
            member=MemberRef(id=str(oid), name=member.name),
            summary=summary,
            history=MemberHistory(
                deposits=[DepositResponse.from_row(d, names) for d in deposits],
                meals=[MealResponse.from_row(m, names) for m in meals],
                groceries=[GroceryResponse.from_row(g, names) for g in groceries],
                expenses=aggregation.member_expense_history(oid, expenses, names)
            )
        )
