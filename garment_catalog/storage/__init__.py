"""Persistent history storage."""

from .keyvalue import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .repository import (
    ANALYSIS_HISTORY_KEY,
    PRICE_HISTORY_KEY,
    TRYON_HISTORY_KEY,
    HistoryCollection,
    HistoryStore,
)

__all__ = [
    "ANALYSIS_HISTORY_KEY",
    "FileKeyValueStore",
    "HistoryCollection",
    "HistoryStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PRICE_HISTORY_KEY",
    "TRYON_HISTORY_KEY",
]
