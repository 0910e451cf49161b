"""
Schema migrations for persisted records.

Migrations are an ordered chain of steps keyed by schema version. Each step
is idempotent and gated by a flag in the migrations store; the flag is only
written after the step finished a full pass, so an interrupted step simply
runs again on the next startup.

Steps:
- v2-player-ids: sessions that identified players by name are rewritten to
  reference registry ids, creating registry players for unseen names.
- v3-snake-case-fields: camelCase keys left over from older clients are
  renamed to the snake_case names the models use.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from app.db.store import (
    KeyValueStore,
    PLAYERS,
    SESSIONS,
    ACTIVE_GAME,
    ACTIVE_GAME_KEY,
    SETTINGS,
    SETTINGS_KEY,
    OWNER,
    OWNER_KEY,
    date_sort_key,
)
from app.models.base import generate_id
from app.models.player import Player, normalize_name
from app.repositories.migration_repo import MigrationRepository
from app.repositories.player_repo import PlayerRepository

logger = logging.getLogger(__name__)

# Legacy name fields and the id field that replaces them
ROSTER_NAME_FIELDS = ("name", "player_name", "playerName")
ROSTER_ID_FIELDS = ("player_id", "playerId")
FROM_NAME_FIELDS = ("from_player", "fromPlayer")
FROM_ID_FIELDS = ("from_player_id", "fromPlayerId")
TO_NAME_FIELDS = ("to_player", "toPlayer")
TO_ID_FIELDS = ("to_player_id", "toPlayerId")


@dataclass(frozen=True)
class MigrationStep:
    version: str
    description: str
    apply: Callable[[KeyValueStore], Awaitable[int]]


# ===== v2: name-keyed players -> id-keyed players =====

class PlayerIdResolver:
    """
    Case-insensitive name -> registry id map.

    Seeded from the registry so names created by an earlier, interrupted pass
    are reused instead of duplicated.
    """

    def __init__(self, repo: PlayerRepository):
        self.repo = repo
        self.ids: Dict[str, str] = {}
        self.created: Dict[str, Player] = {}

    async def load(self) -> None:
        for doc in await self.repo.store.get_all(PLAYERS):
            name = doc.get("display_name") or doc.get("displayName")
            player_id = doc.get("id")
            if not name or not player_id:
                continue
            # first registry entry for a name wins
            self.ids.setdefault(normalize_name(name), player_id)

    async def resolve(self, name: Optional[str], seen_at: datetime) -> str:
        if not isinstance(name, str) or not name.strip():
            fresh_id = generate_id()
            logger.warning(
                "Legacy entry without a usable name, assigned fresh id %s", fresh_id,
                extra={"migration": "v2-player-ids"}
            )
            return fresh_id

        key = normalize_name(name)
        player_id = self.ids.get(key)
        if player_id is not None:
            created = self.created.get(player_id)
            if created and seen_at > created.last_used_at:
                self.created[player_id] = created.model_copy(update={"last_used_at": seen_at})
            return player_id

        player = Player(display_name=name.strip(), created_at=seen_at, last_used_at=seen_at)
        # registry entry goes in before any session references it
        await self.repo.save_player(player)
        self.ids[key] = player.id
        self.created[player.id] = player
        logger.info(
            "Created player %r from legacy session data", player.display_name,
            extra={"player_id": player.id, "migration": "v2-player-ids"}
        )
        return player.id

    async def flush(self) -> None:
        """Persist last_used_at for players created during this pass."""
        for player in self.created.values():
            await self.repo.save_player(player)


def _first(entry: dict, fields: Tuple[str, ...]):
    for field in fields:
        if entry.get(field):
            return entry[field]
    return None


def _has_name(entry: dict, fields: Tuple[str, ...]) -> bool:
    return any(field in entry for field in fields)


def _drop(entry: dict, fields: Tuple[str, ...]) -> None:
    for field in fields:
        entry.pop(field, None)


def _created_at(doc: dict) -> datetime:
    # v3 renames createdAt later, so legacy records still carry the camelCase key
    return date_sort_key(doc.get("created_at") or doc.get("createdAt"))


def _session_date(doc: dict) -> datetime:
    seen_at = _created_at(doc)
    if seen_at.year == datetime.min.year:
        return datetime.now(timezone.utc)
    return seen_at


async def _rewrite_reference(
    entry: dict,
    name_fields: Tuple[str, ...],
    id_fields: Tuple[str, ...],
    target: str,
    legacy_ids: Dict[str, str],
    resolver: PlayerIdResolver,
    seen_at: datetime
) -> bool:
    """Point one result/settlement reference at a registry id."""
    current_id = _first(entry, id_fields)

    if current_id is not None and current_id not in legacy_ids:
        # already id-keyed
        return False

    if current_id is not None:
        new_id = legacy_ids[current_id]
    elif _has_name(entry, name_fields):
        new_id = await resolver.resolve(_first(entry, name_fields), seen_at)
    else:
        return False

    _drop(entry, name_fields)
    _drop(entry, id_fields)
    entry[target] = new_id
    return True


async def migrate_session_player_ids(doc: dict, resolver: PlayerIdResolver) -> bool:
    """
    Rewrite one session record in place. Returns True if anything changed.

    Roster entries lacking a player id are legacy; their per-game "id" (if
    any) is remembered so results and settlements that pointed at it follow
    the same player.
    """
    seen_at = _session_date(doc)
    legacy_ids: Dict[str, str] = {}
    changed = False

    for entry in doc.get("players") or []:
        if _first(entry, ROSTER_ID_FIELDS) is not None:
            continue
        new_id = await resolver.resolve(_first(entry, ROSTER_NAME_FIELDS), seen_at)
        legacy_id = entry.pop("id", None)
        if legacy_id is not None:
            legacy_ids[legacy_id] = new_id
        _drop(entry, ROSTER_NAME_FIELDS)
        _drop(entry, ROSTER_ID_FIELDS)
        entry["player_id"] = new_id
        changed = True

    for result in doc.get("results") or []:
        if _has_name(result, ROSTER_NAME_FIELDS) or _first(result, ROSTER_ID_FIELDS) in legacy_ids:
            changed |= await _rewrite_reference(
                result, ROSTER_NAME_FIELDS, ROSTER_ID_FIELDS, "player_id",
                legacy_ids, resolver, seen_at
            )

    for settlement in doc.get("settlements") or []:
        changed |= await _rewrite_reference(
            settlement, FROM_NAME_FIELDS, FROM_ID_FIELDS, "from_player_id",
            legacy_ids, resolver, seen_at
        )
        changed |= await _rewrite_reference(
            settlement, TO_NAME_FIELDS, TO_ID_FIELDS, "to_player_id",
            legacy_ids, resolver, seen_at
        )

    return changed


async def migrate_player_ids(store: KeyValueStore) -> int:
    """Rewrite every name-keyed session. Returns the number of records written."""
    resolver = PlayerIdResolver(PlayerRepository(store))
    await resolver.load()
    written = 0

    # oldest first, so a name keeps the casing it was first seen with
    sessions = await store.get_all(SESSIONS)
    sessions.sort(key=_created_at)
    for doc in sessions:
        if await migrate_session_player_ids(doc, resolver):
            await store.put(SESSIONS, doc)
            written += 1

    active = await store.get(ACTIVE_GAME, ACTIVE_GAME_KEY)
    if active and await migrate_session_player_ids(active, resolver):
        await store.put(ACTIVE_GAME, active, key=ACTIVE_GAME_KEY)
        written += 1

    await resolver.flush()
    logger.info(
        "Migrated %d session(s), created %d player(s)", written, len(resolver.created),
        extra={"migration": "v2-player-ids"}
    )
    return written


# ===== v3: camelCase keys -> snake_case keys =====

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def snake_case_keys(value):
    """Return (converted, changed) with every dict key snake_cased."""
    if isinstance(value, dict):
        changed = False
        converted = {}
        for key, item in value.items():
            new_key = to_snake(key) if isinstance(key, str) else key
            new_item, item_changed = snake_case_keys(item)
            changed = changed or item_changed or new_key != key
            converted[new_key] = new_item
        return converted, changed
    if isinstance(value, list):
        changed = False
        converted = []
        for item in value:
            new_item, item_changed = snake_case_keys(item)
            changed = changed or item_changed
            converted.append(new_item)
        return converted, changed
    return value, False


async def migrate_snake_case_fields(store: KeyValueStore) -> int:
    written = 0

    for collection in (PLAYERS, SESSIONS):
        for doc in await store.get_all(collection):
            converted, changed = snake_case_keys(doc)
            if changed:
                await store.put(collection, converted)
                written += 1

    for collection, key in ((ACTIVE_GAME, ACTIVE_GAME_KEY), (SETTINGS, SETTINGS_KEY), (OWNER, OWNER_KEY)):
        doc = await store.get(collection, key)
        if not doc:
            continue
        converted, changed = snake_case_keys(doc)
        if changed:
            await store.put(collection, converted, key=key)
            written += 1

    logger.info(
        "Renamed fields in %d record(s)", written,
        extra={"migration": "v3-snake-case-fields"}
    )
    return written


MIGRATIONS: List[MigrationStep] = [
    MigrationStep(
        version="v2-player-ids",
        description="Reference players by registry id instead of name",
        apply=migrate_player_ids,
    ),
    MigrationStep(
        version="v3-snake-case-fields",
        description="Rename camelCase record fields to snake_case",
        apply=migrate_snake_case_fields,
    ),
]


async def run_migrations(
    store: KeyValueStore,
    steps: Optional[List[MigrationStep]] = None
) -> List[str]:
    """
    Run every pending step in order. Returns the versions applied.

    A failing step propagates; its flag and those of later steps stay unset.
    """
    repo = MigrationRepository(store)
    applied = []

    for step in steps if steps is not None else MIGRATIONS:
        if await repo.is_done(step.version):
            continue
        logger.info("Running migration %s: %s", step.version, step.description)
        await step.apply(store)
        await repo.mark_done(step.version)
        applied.append(step.version)

    return applied
