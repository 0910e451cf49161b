import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import settings
from app.db.store import SESSIONS, date_sort_key, record_key

logger = logging.getLogger(__name__)


class MongoStore:
    """
    KeyValueStore over MongoDB: one collection per store, keyed by _id.

    The record's own "id" is kept inside the document as well, so what comes
    back from get() is exactly what was put().
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    @staticmethod
    def _strip(doc: Optional[dict]) -> Optional[dict]:
        if doc is None:
            return None
        doc.pop("_id", None)
        return doc

    async def get(self, store: str, key: str) -> Optional[dict]:
        doc = await self.db[store].find_one({"_id": key})
        return self._strip(doc)

    async def put(self, store: str, record: dict, key: Optional[str] = None) -> None:
        doc_id = record_key(record, key)
        doc = dict(record)
        doc["_id"] = doc_id
        await self.db[store].replace_one({"_id": doc_id}, doc, upsert=True)

    async def delete(self, store: str, key: str) -> None:
        await self.db[store].delete_one({"_id": key})

    async def clear(self, store: str) -> None:
        await self.db[store].delete_many({})

    async def get_all(self, store: str) -> list[dict]:
        docs = await self.db[store].find({}).to_list(None)
        return [self._strip(doc) for doc in docs]

    async def get_all_sorted_by_date(self, store: str) -> list[dict]:
        docs = await self.db[store].find({}).sort("created_at", 1).to_list(None)
        # legacy records may hold ISO strings, which mongo orders apart from dates
        docs.sort(key=lambda d: date_sort_key(d.get("created_at")))
        return [self._strip(doc) for doc in docs]


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None


mongodb = MongoDatabase()


async def connect_to_mongo() -> MongoStore:
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)
    return MongoStore(mongodb.db)


async def disconnect_from_mongo():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
        mongodb.client = None
        mongodb.db = None
        logger.info("Disconnected from MongoDB")


async def create_indexes():
    """Create database indexes."""
    # by-date index for session history
    await mongodb.db[SESSIONS].create_index("created_at")
