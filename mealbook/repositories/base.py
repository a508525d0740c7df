from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from mealbook.models.base import to_object_id
from mealbook.models.ledger import LedgerRow

RowT = TypeVar("RowT", bound=LedgerRow)


class LedgerRepository(Generic[RowT]):
    """Month-bucketed collection operations shared by every ledger type."""

    collection_name: str
    label: str
    model: Type[RowT]

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.collection_name]

    async def list_rows(self, month: Optional[str] = None, **filters: Any) -> List[RowT]:
        """List rows, newest first, optionally scoped to a month."""
        query: Dict[str, Any] = {k: v for k, v in filters.items() if v is not None}
        if month:
            query["month"] = month
        docs = await self.collection.find(query).sort("date", -1).to_list(None)
        return [self.model(**doc) for doc in docs]

    async def get_row(self, row_id: str) -> Optional[RowT]:
        oid = to_object_id(row_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        if doc:
            return self.model(**doc)
        return None

    async def insert_row(self, fields: Dict[str, Any]) -> RowT:
        row = self.model(**fields)
        await self.collection.insert_one(row.model_dump(by_alias=True))
        return row

    async def update_row(self, row_id: str, updates: Dict[str, Any]) -> Optional[RowT]:
        oid = to_object_id(row_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
        if doc:
            return self.model(**doc)
        return None

    async def delete_row(self, row_id: str) -> bool:
        oid = to_object_id(row_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0
