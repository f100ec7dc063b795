"""
History Storage — Persistence layer for run history.

Provides storage backends for saving, loading, and querying records.
Both backends are append-only: saving an existing record id is an error.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from teraverse.history.record import HistoryRecord


@runtime_checkable
class HistoryStore(Protocol):
    """
    Protocol for history storage backends.
    """

    def save(self, record: HistoryRecord) -> None:
        """Append a record."""
        ...

    def load(self, record_id: str) -> HistoryRecord | None:
        """Load a record by id."""
        ...

    def query(
        self,
        dungeon_id: int | None = None,
        provider_name: str | None = None,
        since: datetime | None = None,
        limit: int | None = 100,
    ) -> list[HistoryRecord]:
        """Query records with filters, newest first."""
        ...

    def count(self) -> int:
        """Count total records."""
        ...

    def clear(self) -> None:
        """Remove every record."""
        ...


class InMemoryHistoryStore:
    """
    In-memory history store.

    Records are lost when the process terminates.
    """

    def __init__(self):
        self._records: dict[str, HistoryRecord] = {}

    def save(self, record: HistoryRecord) -> None:
        if record.record_id in self._records:
            raise ValueError(f"Record already stored: {record.record_id}")
        self._records[record.record_id] = record

    def load(self, record_id: str) -> HistoryRecord | None:
        return self._records.get(record_id)

    def query(
        self,
        dungeon_id: int | None = None,
        provider_name: str | None = None,
        since: datetime | None = None,
        limit: int | None = 100,
    ) -> list[HistoryRecord]:
        results = []

        for record in self._records.values():
            if dungeon_id is not None and record.dungeon_id != dungeon_id:
                continue
            if provider_name and record.provider_name != provider_name:
                continue
            if since and record.timestamp < since:
                continue
            results.append(record)

        results.sort(key=lambda r: r.timestamp, reverse=True)
        return results if limit is None else results[:limit]

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()


class SQLiteHistoryStore:
    """
    SQLite-backed history store.

    Stores records in a local SQLite database.
    """

    def __init__(self, db_path: str | Path = "teraverse_history.db"):
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS runs (
                    record_id TEXT PRIMARY KEY,
                    dungeon_id INTEGER NOT NULL,
                    provider_name TEXT NOT NULL,
                    juiced INTEGER NOT NULL,
                    enemies_defeated INTEGER NOT NULL,
                    timestamp TEXT NOT NULL,
                    data TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_dungeon_id
                ON runs(dungeon_id)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_timestamp
                ON runs(timestamp)
            """)
            conn.commit()

    def save(self, record: HistoryRecord) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO runs
                    (record_id, dungeon_id, provider_name, juiced,
                     enemies_defeated, timestamp, data)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.record_id,
                    record.dungeon_id,
                    record.provider_name,
                    1 if record.juiced else 0,
                    record.enemies_defeated,
                    record.timestamp.isoformat(),
                    record.to_json(),
                ))
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise ValueError(f"Record already stored: {record.record_id}") from e

    def load(self, record_id: str) -> HistoryRecord | None:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT data FROM runs WHERE record_id = ?",
                (record_id,)
            )
            row = cursor.fetchone()
            if row:
                return HistoryRecord.from_json(row[0])
            return None

    def query(
        self,
        dungeon_id: int | None = None,
        provider_name: str | None = None,
        since: datetime | None = None,
        limit: int | None = 100,
    ) -> list[HistoryRecord]:
        conditions = []
        params: list[object] = []

        if dungeon_id is not None:
            conditions.append("dungeon_id = ?")
            params.append(dungeon_id)
        if provider_name:
            conditions.append("provider_name = ?")
            params.append(provider_name)
        if since:
            conditions.append("timestamp >= ?")
            params.append(since.isoformat())

        where_clause = " AND ".join(conditions) if conditions else "1=1"
        params.append(-1 if limit is None else limit)

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(f"""
                SELECT data FROM runs
                WHERE {where_clause}
                ORDER BY timestamp DESC
                LIMIT ?
            """, params)

            return [HistoryRecord.from_json(row[0]) for row in cursor.fetchall()]

    def count(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("SELECT COUNT(*) FROM runs")
            return cursor.fetchone()[0]

    def clear(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM runs")
            conn.commit()


def create_memory_store() -> InMemoryHistoryStore:
    """Factory for in-memory store."""
    return InMemoryHistoryStore()


def create_sqlite_store(db_path: str | Path = "teraverse_history.db") -> SQLiteHistoryStore:
    """Factory for SQLite store."""
    return SQLiteHistoryStore(db_path)


def create_history_store(db_path: str | Path | None = None) -> HistoryStore:
    """SQLite store when a path is given, otherwise in-memory."""
    if db_path:
        return create_sqlite_store(db_path)
    return create_memory_store()
