from datetime import datetime, timezone

from app.db.store import KeyValueStore, MIGRATIONS


class MigrationRepository:
    """Persisted "migration done" flags, one record per schema version."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.collection = MIGRATIONS

    async def is_done(self, version: str) -> bool:
        doc = await self.store.get(self.collection, version)
        return bool(doc and doc.get("done"))

    async def mark_done(self, version: str) -> None:
        await self.store.put(self.collection, {
            "id": version,
            "done": True,
            "completed_at": datetime.now(timezone.utc),
        })
