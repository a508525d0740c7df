import itertools
import os
from collections import defaultdict
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from mealbook.core.auth import get_current_user
from mealbook.db.mongo import get_db
from mealbook.main import app
from mealbook.models.user import UserInDB

# Test database configuration
TEST_MONGODB_URI = os.getenv("MONGODB_URI")
TEST_MONGODB_DB = "mealbook_test"

_phones = itertools.count(1)


def make_cursor(docs=None):
    """A Motor-like cursor whose sort() chains and to_list() returns ``docs``."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    return cursor


def make_collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    collection.find = MagicMock(return_value=make_cursor())
    return collection


@pytest.fixture
def mock_db():
    """Mock MongoDB database; ``mock_db["meals"]`` is a mock collection."""
    collections = defaultdict(make_collection)
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: collections[name]
    return db


def user_doc(name="Alice", role="general", months=None, phone=None, password_hash="hash", is_active=True):
    """A users document as stored in MongoDB."""
    access = {"role": role}
    if role == "manager":
        access["assigned_months"] = months or []
    now = datetime.now(timezone.utc)
    return {
        "_id": ObjectId(),
        "phone_number": phone or f"0170000{next(_phones):04d}",
        "name": name,
        "password_hash": password_hash,
        "access": access,
        "is_active": is_active,
        "created_at": now,
        "updated_at": now,
    }


def make_user(name="Alice", role="general", months=None, **kwargs) -> UserInDB:
    return UserInDB(**user_doc(name=name, role=role, months=months, **kwargs))


@pytest.fixture
def super_user():
    return make_user("Root", role="super")


@pytest.fixture
def manager_user():
    return make_user("Mona", role="manager", months=["2025-01"])


@pytest.fixture
def general_user():
    return make_user("Gina")


@pytest_asyncio.fixture
async def client(mock_db):
    """API client against the app with the database swapped for ``mock_db``."""
    app.dependency_overrides[get_db] = lambda: mock_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Authenticate subsequent requests as the given user."""
    def _login(user: UserInDB) -> UserInDB:
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login


@pytest_asyncio.fixture
async def test_db() -> AsyncIOMotorDatabase:
    """Fixture for test MongoDB database (for async repository tests)."""
    if not TEST_MONGODB_URI:
        pytest.skip("MONGODB_URI not set")

    client = AsyncIOMotorClient(TEST_MONGODB_URI)
    db = client[TEST_MONGODB_DB]

    # Drop database before test to ensure clean state
    await client.drop_database(TEST_MONGODB_DB)

    await db["users"].create_index("phone_number", unique=True)
    await db["meals"].create_index([("date", 1), ("member_id", 1)], unique=True)

    yield db

    await client.drop_database(TEST_MONGODB_DB)
    client.close()
