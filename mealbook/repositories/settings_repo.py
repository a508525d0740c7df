from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from mealbook.models.settings import HouseholdSettings
from mealbook.utils.months import current_month


class SettingsRepository:
    """The singleton settings document."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["settings"]

    async def get_settings(self) -> HouseholdSettings:
        """Return settings, creating them with the current month on first read."""
        doc = await self.collection.find_one_and_update(
            {},
            {"$setOnInsert": {"current_month": current_month()}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return HouseholdSettings(**doc)

    async def set_current_month(self, month: str) -> HouseholdSettings:
        doc = await self.collection.find_one_and_update(
            {},
            {"$set": {"current_month": month}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return HouseholdSettings(**doc)
