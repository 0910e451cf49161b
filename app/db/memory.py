import copy
from typing import Dict, Optional

from app.db.store import date_sort_key, record_key


class MemoryStore:
    """
    In-process KeyValueStore.

    Records are deep-copied on the way in and out so callers never share
    mutable state with the store. Used for tests and STORE_BACKEND=memory.
    """

    def __init__(self):
        self._stores: Dict[str, Dict[str, dict]] = {}

    def _table(self, store: str) -> Dict[str, dict]:
        return self._stores.setdefault(store, {})

    async def get(self, store: str, key: str) -> Optional[dict]:
        record = self._table(store).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def put(self, store: str, record: dict, key: Optional[str] = None) -> None:
        self._table(store)[record_key(record, key)] = copy.deepcopy(record)

    async def delete(self, store: str, key: str) -> None:
        self._table(store).pop(key, None)

    async def clear(self, store: str) -> None:
        self._table(store).clear()

    async def get_all(self, store: str) -> list[dict]:
        return [copy.deepcopy(r) for r in self._table(store).values()]

    async def get_all_sorted_by_date(self, store: str) -> list[dict]:
        records = await self.get_all(store)
        records.sort(key=lambda r: date_sort_key(r.get("created_at")))
        return records
