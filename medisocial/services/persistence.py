"""Persistence store: history log, last post draft and RTS history over a key-value medium."""
import json
from dataclasses import dataclass, field

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from medisocial.errors import PersistenceFailure
from medisocial.models.db_models import KeyValueEntry
from medisocial.models.schemas import PostResult, RTSHistoryEntry
from medisocial.services.capabilities import KeyValueMedium
from medisocial.utils.logging import get_logger

logger = get_logger(__name__)

HISTORY_KEY = "medisocial_history"
DRAFT_KEY = "medisocial_last_post"
RTS_HISTORY_KEY = "rts_history"

_history_adapter = TypeAdapter(list[PostResult])
_rts_adapter = TypeAdapter(list[RTSHistoryEntry])


class InMemoryMedium:
    """Dict-backed medium for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes += 1


class SqlKeyValueMedium:
    """Medium backed by the kv_store table (SQLite by default, any async SQLAlchemy URL works)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self.session_factory() as session:
            r = await session.execute(select(KeyValueEntry.value).where(KeyValueEntry.key == key))
            return r.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        # Full overwrite, last writer wins
        async with self.session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()


@dataclass
class PersistedState:
    history: list[PostResult] = field(default_factory=list)
    draft: PostResult | None = None


def _decode(raw: str, adapter: TypeAdapter, key: str):
    try:
        return adapter.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise PersistenceFailure(f"Malformed payload under {key}") from e


class PersistenceStore:
    """
    Write-through cache of the studio's durable state. Sole reader/writer of the medium.
    Malformed payloads load as empty and are replaced by the next save.
    """

    def __init__(self, medium: KeyValueMedium):
        self.medium = medium

    async def load(self) -> PersistedState:
        """Return persisted history (newest first) and the last draft, empty when absent or malformed."""
        return PersistedState(
            history=await self._load_list(HISTORY_KEY, _history_adapter),
            draft=await self._load_draft(),
        )

    async def save_history(self, history: list[PostResult]) -> bool:
        """Overwrite the history key. False when the medium rejected the write."""
        return await self._write(HISTORY_KEY, _history_adapter.dump_json(history).decode())

    async def save_draft(self, draft: PostResult | None) -> bool:
        """Overwrite the draft slot. An absent draft leaves the stored one untouched."""
        if draft is None:
            return False
        return await self._write(DRAFT_KEY, draft.model_dump_json())

    async def load_rts_history(self) -> list[RTSHistoryEntry]:
        return await self._load_list(RTS_HISTORY_KEY, _rts_adapter)

    async def save_rts_history(self, entries: list[RTSHistoryEntry]) -> bool:
        return await self._write(RTS_HISTORY_KEY, _rts_adapter.dump_json(entries).decode())

    async def _load_list(self, key: str, adapter: TypeAdapter) -> list:
        raw = await self._read(key)
        if raw is None:
            return []
        try:
            return _decode(raw, adapter, key)
        except PersistenceFailure as e:
            logger.warning("persisted_payload_discarded", key=key, error=e.message)
            return []

    async def _load_draft(self) -> PostResult | None:
        raw = await self._read(DRAFT_KEY)
        if raw is None:
            return None
        try:
            return PostResult.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("persisted_payload_discarded", key=DRAFT_KEY, error=str(e))
            return None

    async def _read(self, key: str) -> str | None:
        try:
            raw = await self.medium.get(key)
        except Exception as e:
            # Unreadable medium counts as empty state
            logger.warning("persisted_payload_unreadable", key=key, error=str(e))
            return None
        return raw or None

    async def _write(self, key: str, value: str) -> bool:
        """Best-effort write-through. A failing medium is logged and the in-memory state stays authoritative."""
        try:
            await self.medium.set(key, value)
        except Exception as e:
            logger.warning("persist_failed", key=key, error=str(e))
            return False
        return True
