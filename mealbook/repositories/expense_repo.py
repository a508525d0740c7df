from typing import List

from bson import ObjectId

from mealbook.models.ledger import ExpenseInDB
from mealbook.repositories.base import LedgerRepository


class ExpenseRepository(LedgerRepository[ExpenseInDB]):
    collection_name = "expenses"
    label = "Expense"
    model = ExpenseInDB

    async def list_involving(self, member_id: ObjectId, month: str) -> List[ExpenseInDB]:
        """Expenses in a month that the member paid for or shares."""
        docs = await self.collection.find({
            "month": month,
            "$or": [{"paid_by": member_id}, {"split_among": member_id}]
        }).sort("date", -1).to_list(None)
        return [ExpenseInDB(**doc) for doc in docs]
