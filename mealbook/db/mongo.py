import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from mealbook.core.config import settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()


def _ensure_client() -> AsyncIOMotorDatabase:
    # Motor connects lazily; creating the client once is enough to share it.
    if mongodb.db is None:
        mongodb.client = AsyncIOMotorClient(settings.MONGODB_URI)
        mongodb.db = mongodb.client[settings.MONGODB_DB]
        logger.info("Created MongoDB client for database %s", settings.MONGODB_DB)
    return mongodb.db


async def connect_to_mongo():
    """Connect to MongoDB."""
    _ensure_client()
    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB)


async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
        mongodb.client = None
        mongodb.db = None
        logger.info("Disconnected from MongoDB")


async def create_indexes():
    """Create database indexes."""
    db = mongodb.db

    await db["users"].create_index("phone_number", unique=True)
    await db["users"].create_index([("access.role", ASCENDING), ("is_active", ASCENDING)])

    # One meal row per member per day
    await db["meals"].create_index(
        [("date", ASCENDING), ("member_id", ASCENDING)],
        unique=True
    )

    for name in ("meals", "groceries", "expenses", "deposits"):
        await db[name].create_index([("month", ASCENDING), ("date", DESCENDING)])


def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return _ensure_client()
