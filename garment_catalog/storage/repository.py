"""History collections persisted as JSON arrays in a key-value store."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Generic, TypeVar

from garment_catalog.catalog.models import (
    STORED_RECORD_CONTEXT,
    AnalysisEntry,
    PriceEstimateEntry,
    TryOnHistoryItem,
    WireModel,
)
from garment_catalog.storage.keyvalue import KeyValueStore
from garment_catalog.storage.migrations import migrate_analysis_record

logger = logging.getLogger(__name__)

ANALYSIS_HISTORY_KEY = "clothing-analysis-history"
PRICE_HISTORY_KEY = "clothing-price-history"
TRYON_HISTORY_KEY = "clothing-tryon-history"
UNREADABLE_SUFFIX = ".unreadable"

EntryT = TypeVar("EntryT", bound=WireModel)


class HistoryCollection(Generic[EntryT]):
    """Newest-first list of entries stored under one key.

    Records that do not decode are skipped on read but written back unchanged,
    so a write never drops data this version cannot interpret.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        model: type[EntryT],
        migrate: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._model = model
        self._migrate = migrate
        self._lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    @property
    def unreadable_key(self) -> str:
        """Key holding the last blob that could not be parsed as a JSON array."""

        return self._key + UNREADABLE_SUFFIX

    async def load_all(self) -> list[EntryT]:
        """Return every decodable entry; never raises for storage or data problems."""

        try:
            records, _ = await self._read()
        except OSError as exc:
            logger.warning("Could not read history %s: %s", self._key, exc)
            return []
        return self._entries(records)

    async def get(self, entry_id: str) -> EntryT | None:
        for entry in await self.load_all():
            if entry.id == entry_id:
                return entry
        return None

    async def prepend(self, entry: EntryT) -> list[EntryT]:
        """Insert ``entry`` at the front and persist the collection."""

        async with self._lock:
            records, unreadable = await self._read()
            if unreadable is not None:
                logger.warning("Moving unreadable history %s to %s", self._key, self.unreadable_key)
                await self._store.set(self.unreadable_key, unreadable)
            records.insert(0, entry)
            await self._save(records)
            return self._entries(records)

    async def delete_by_id(self, entry_id: str) -> bool:
        """Remove the entry with ``entry_id``; return whether one was removed."""

        async with self._lock:
            records, _ = await self._read()
            remaining = [
                record
                for record in records
                if not (isinstance(record, self._model) and record.id == entry_id)
            ]
            if len(remaining) == len(records):
                return False
            await self._save(remaining)
            return True

    async def clear(self) -> None:
        async with self._lock:
            await self._store.remove(self._key)

    async def _read(self) -> tuple[list[Any], str | None]:
        """Return the stored records, decoded where possible.

        The second item is the raw blob when it is not a JSON array at all.
        """

        raw = await self._store.get(self._key)
        if raw is None:
            return [], None
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            logger.warning("Ignoring unreadable history %s: %s", self._key, exc)
            return [], raw
        if not isinstance(payload, list):
            logger.warning("Ignoring history %s: expected a JSON array, got %s", self._key, type(payload).__name__)
            return [], raw
        return [self._decode(index, record) for index, record in enumerate(payload)], None

    def _decode(self, index: int, record: Any) -> Any:
        """Return the decoded entry, or ``record`` itself when it cannot be decoded."""

        if not isinstance(record, dict):
            logger.warning("Skipping %s record %d: expected a JSON object", self._key, index)
            return record
        try:
            migrated = self._migrate(record) if self._migrate is not None else record
            return self._model.model_validate(migrated, context=STORED_RECORD_CONTEXT)
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.warning("Skipping %s record %d (id=%s): %s", self._key, index, record.get("id"), exc)
            return record

    def _entries(self, records: list[Any]) -> list[EntryT]:
        return [record for record in records if isinstance(record, self._model)]

    async def _save(self, records: list[Any]) -> None:
        body = json.dumps(
            [record.to_wire() if isinstance(record, WireModel) else record for record in records],
            ensure_ascii=False,
        )
        await self._store.set(self._key, body)


class HistoryStore:
    """The three history collections sharing one backing store."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self.analyses: HistoryCollection[AnalysisEntry] = HistoryCollection(
            store,
            ANALYSIS_HISTORY_KEY,
            AnalysisEntry,
            migrate=migrate_analysis_record,
        )
        self.price_estimates: HistoryCollection[PriceEstimateEntry] = HistoryCollection(
            store,
            PRICE_HISTORY_KEY,
            PriceEstimateEntry,
        )
        self.try_ons: HistoryCollection[TryOnHistoryItem] = HistoryCollection(
            store,
            TRYON_HISTORY_KEY,
            TryOnHistoryItem,
        )

    async def get_analysis(self, analysis_id: str) -> AnalysisEntry | None:
        return await self.analyses.get(analysis_id)

    async def load_price_history_for_item(self, analysis_id: str) -> list[PriceEstimateEntry]:
        """Price estimates made for one analysis, newest first."""

        return [entry for entry in await self.price_estimates.load_all() if entry.analysis_id == analysis_id]

    async def load_try_on_history_for_item(self, analysis_id: str) -> list[TryOnHistoryItem]:
        """Try-ons generated for one analysis, newest first."""

        return [entry for entry in await self.try_ons.load_all() if entry.analysis_id == analysis_id]


__all__ = [
    "ANALYSIS_HISTORY_KEY",
    "HistoryCollection",
    "HistoryStore",
    "PRICE_HISTORY_KEY",
    "TRYON_HISTORY_KEY",
    "UNREADABLE_SUFFIX",
]
