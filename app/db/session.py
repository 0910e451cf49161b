import logging

from app.core.config import settings
from app.db.memory import MemoryStore
from app.db.mongo import connect_to_mongo, disconnect_from_mongo
from app.db.store import KeyValueStore

logger = logging.getLogger(__name__)


class StoreHolder:
    store: KeyValueStore = None


holder = StoreHolder()


async def open_store() -> KeyValueStore:
    """Open the configured backend and make it the active store."""
    if settings.STORE_BACKEND == "memory":
        holder.store = MemoryStore()
        logger.info("Using in-memory store")
    elif settings.STORE_BACKEND == "mongo":
        holder.store = await connect_to_mongo()
    else:
        raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
    return holder.store


async def close_store():
    if settings.STORE_BACKEND == "mongo":
        await disconnect_from_mongo()
    holder.store = None


async def get_store() -> KeyValueStore:
    """Return the active store (FastAPI dependency)."""
    return holder.store
