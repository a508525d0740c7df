"""Repository tests against a real MongoDB (skipped unless MONGODB_URI is set)."""
from datetime import datetime

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from mealbook.models.user import GeneralAccess, ManagerAccess, SuperAccess
from mealbook.repositories.expense_repo import ExpenseRepository
from mealbook.repositories.grocery_repo import GroceryRepository
from mealbook.repositories.meal_repo import MealRepository
from mealbook.repositories.settings_repo import SettingsRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.utils.months import current_month


@pytest.mark.asyncio
class TestUserRepository:
    """Test UserRepository operations."""

    async def test_create_and_fetch(self, test_db):
        user_repo = UserRepository(test_db)

        user = await user_repo.create_user(
            name="Alice", phone_number="01700000001", password_hash="hash",
            access=ManagerAccess(assigned_months=["2025-01"])
        )

        fetched = await user_repo.get_user_by_phone("01700000001")
        assert fetched.id == user.id
        assert fetched.assigned_months == ["2025-01"]
        assert await user_repo.get_user_by_id(str(user.id)) is not None
        assert await user_repo.get_user_by_id("bogus") is None

    async def test_duplicate_phone(self, test_db):
        user_repo = UserRepository(test_db)
        await user_repo.create_user("Alice", "01700000002", "hash", GeneralAccess())

        with pytest.raises(DuplicateKeyError):
            await user_repo.create_user("Alicia", "01700000002", "hash", GeneralAccess())

    async def test_active_only_lookup(self, test_db):
        user_repo = UserRepository(test_db)
        user = await user_repo.create_user("Gina", "01700000003", "hash", GeneralAccess())
        await user_repo.update_user(str(user.id), {"is_active": False})

        assert await user_repo.get_user_by_phone("01700000003", active_only=True) is None
        assert await user_repo.get_user_by_phone("01700000003") is not None
        assert await user_repo.list_active_members() == []

    async def test_count_active_supers(self, test_db):
        user_repo = UserRepository(test_db)
        root = await user_repo.create_user("Root", "01700000004", "hash", SuperAccess())
        await user_repo.create_user("Root Two", "01700000005", "hash", SuperAccess())
        await user_repo.update_user(str(root.id), {"is_active": False})

        assert await user_repo.count_active_supers() == 1
        assert await user_repo.count_users() == 2

    async def test_get_names(self, test_db):
        user_repo = UserRepository(test_db)
        alice = await user_repo.create_user("Alice", "01700000006", "hash", GeneralAccess())

        names = await user_repo.get_names([alice.id, str(alice.id), ObjectId(), "junk"])

        assert names == {str(alice.id): "Alice"}


@pytest.mark.asyncio
class TestMealRepository:

    async def test_upsert_is_keyed_by_day_and_member(self, test_db):
        repo = MealRepository(test_db)
        member = ObjectId()
        day = datetime(2025, 1, 10)

        await repo.upsert_meal(day, member, 2.0, "2025-01")
        await repo.upsert_meal(day, member, 3.5, "2025-01")

        rows = await repo.list_rows("2025-01")
        assert len(rows) == 1
        assert rows[0].count == 3.5

        assert await repo.remove_meal(day, member) is True
        assert await repo.remove_meal(day, member) is False

    async def test_list_rows_newest_first(self, test_db):
        repo = GroceryRepository(test_db)
        for day in (3, 17, 9):
            await repo.insert_row({
                "date": datetime(2025, 1, day), "month": "2025-01",
                "done_by": ObjectId(), "description": "Rice", "amount": 10.0
            })
        await repo.insert_row({
            "date": datetime(2025, 2, 1), "month": "2025-02",
            "done_by": ObjectId(), "description": "Oil", "amount": 5.0
        })

        rows = await repo.list_rows("2025-01")

        assert [r.date.day for r in rows] == [17, 9, 3]


@pytest.mark.asyncio
class TestExpenseRepository:

    async def test_list_involving(self, test_db):
        repo = ExpenseRepository(test_db)
        a, b, c = ObjectId(), ObjectId(), ObjectId()
        for paid_by, split in ((a, [b]), (b, [a, b]), (b, [b, c])):
            await repo.insert_row({
                "date": datetime(2025, 1, 5), "month": "2025-01", "paid_by": paid_by,
                "split_among": split, "description": "Bill", "amount": 30.0
            })

        rows = await repo.list_involving(a, "2025-01")

        assert len(rows) == 2


@pytest.mark.asyncio
class TestSettingsRepository:

    async def test_defaults_then_updates(self, test_db):
        repo = SettingsRepository(test_db)

        assert (await repo.get_settings()).current_month == current_month()
        await repo.set_current_month("2025-06")

        assert (await repo.get_settings()).current_month == "2025-06"
        assert await test_db["settings"].count_documents({}) == 1
