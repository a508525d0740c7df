from datetime import datetime

from bson import ObjectId

from mealbook.models.ledger import MealInDB
from mealbook.repositories.base import LedgerRepository


class MealRepository(LedgerRepository[MealInDB]):
    """Meal rows, keyed by (date, member_id)."""

    collection_name = "meals"
    label = "Meal"
    model = MealInDB

    async def upsert_meal(self, date: datetime, member_id: ObjectId, count: float, month: str) -> None:
        """Set the count for a member on a day, creating the row if needed."""
        await self.collection.update_one(
            {"date": date, "member_id": member_id},
            {"$set": {"count": count, "month": month}},
            upsert=True
        )

    async def remove_meal(self, date: datetime, member_id: ObjectId) -> bool:
        result = await self.collection.delete_one({"date": date, "member_id": member_id})
        return result.deleted_count > 0
