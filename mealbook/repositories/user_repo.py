from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from mealbook.models.base import to_object_id
from mealbook.models.user import UserInDB


class UserRepository:
    """User database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def create_user(
        self,
        name: str,
        phone_number: str,
        password_hash: str,
        access,
        email: Optional[str] = None
    ) -> UserInDB:
        """Create a new user."""
        user = UserInDB(
            name=name,
            phone_number=phone_number,
            password_hash=password_hash,
            access=access,
            email=email,
            is_active=True
        )
        await self.collection.insert_one(user.model_dump(by_alias=True))
        return user

    async def get_user_by_phone(self, phone_number: str, active_only: bool = False) -> UserInDB | None:
        """Get user by phone number."""
        query: Dict[str, Any] = {"phone_number": phone_number}
        if active_only:
            query["is_active"] = True
        user = await self.collection.find_one(query)
        if user:
            return UserInDB(**user)
        return None

    async def get_user_by_id(self, user_id: str) -> UserInDB | None:
        """Get user by ID."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        user = await self.collection.find_one({"_id": oid})
        if user:
            return UserInDB(**user)
        return None

    async def list_users(self) -> List[UserInDB]:
        """All users, newest first."""
        docs = await self.collection.find({}).sort("created_at", -1).to_list(None)
        return [UserInDB(**doc) for doc in docs]

    async def list_active_members(self) -> List[UserInDB]:
        docs = await self.collection.find({"is_active": True}).sort("name", 1).to_list(None)
        return [UserInDB(**doc) for doc in docs]

    async def count_users(self) -> int:
        return await self.collection.count_documents({})

    async def count_active_supers(self) -> int:
        return await self.collection.count_documents({"access.role": "super", "is_active": True})

    async def update_user(self, user_id: str, update_data: dict) -> UserInDB | None:
        """Update user."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        update_data["updated_at"] = datetime.now(timezone.utc)
        result = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if result:
            return UserInDB(**result)
        return None

    async def get_names(self, user_ids: Iterable) -> Dict[str, str]:
        """Resolve member ids to display names in one query."""
        oids = {oid for oid in (to_object_id(u) for u in user_ids) if oid is not None}
        if not oids:
            return {}
        docs = await self.collection.find(
            {"_id": {"$in": list(oids)}},
            {"name": 1}
        ).to_list(None)
        return {str(doc["_id"]): doc.get("name") for doc in docs}
