from typing import Optional

from app.db.store import KeyValueStore, SETTINGS, SETTINGS_KEY, OWNER, OWNER_KEY
from app.models.app_settings import AppOwner, AppSettings


class SettingsRepository:
    """App-wide settings and the app owner record."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_app_settings(self) -> AppSettings:
        """Stored settings, or the defaults when nothing was saved yet."""
        doc = await self.store.get(SETTINGS, SETTINGS_KEY)
        if doc:
            return AppSettings(**doc)
        return AppSettings()

    async def save_app_settings(self, app_settings: AppSettings) -> None:
        await self.store.put(SETTINGS, app_settings.model_dump(), key=SETTINGS_KEY)

    async def get_owner(self) -> Optional[AppOwner]:
        doc = await self.store.get(OWNER, OWNER_KEY)
        if doc:
            return AppOwner(**doc)
        return None

    async def save_owner(self, owner: AppOwner) -> None:
        await self.store.put(OWNER, owner.model_dump(), key=OWNER_KEY)
