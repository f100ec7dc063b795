"""
History — finished-run records, storage and statistics.

- HistoryRecord: append-only summary of one run
- HistoryStore: in-memory and SQLite backends
- HistoryBus: subscriber fan-out for new records
- HistoryRecorder: ledger to stored, published record
- summarize_history: per-dungeon and per-provider aggregates
"""

from teraverse.history.record import HistoryRecord
from teraverse.history.store import (
    HistoryStore,
    InMemoryHistoryStore,
    SQLiteHistoryStore,
    create_history_store,
    create_memory_store,
    create_sqlite_store,
)
from teraverse.history.bus import DeliveryFailure, HistoryBus, HistoryHandler
from teraverse.history.recorder import HistoryRecorder
from teraverse.history.stats import (
    DungeonStats,
    ProviderStats,
    aggregate_item_changes,
    summarize_history,
)

__all__ = [
    "HistoryRecord",
    "HistoryStore",
    "InMemoryHistoryStore",
    "SQLiteHistoryStore",
    "create_history_store",
    "create_memory_store",
    "create_sqlite_store",
    "DeliveryFailure",
    "HistoryBus",
    "HistoryHandler",
    "HistoryRecorder",
    "DungeonStats",
    "ProviderStats",
    "aggregate_item_changes",
    "summarize_history",
]
