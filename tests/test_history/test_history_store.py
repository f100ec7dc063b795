"""Tests for history records and storage backends."""

from datetime import datetime, timedelta

import pytest

from teraverse.history import (
    HistoryRecord,
    HistoryStore,
    InMemoryHistoryStore,
    SQLiteHistoryStore,
    create_history_store,
    create_memory_store,
    create_sqlite_store,
)


BASE_TIME = datetime(2026, 3, 1, 12, 0, 0)


def make_record(minutes: int, dungeon_id: int = 1, provider: str = "random", defeated: int = 3):
    return HistoryRecord(
        dungeon_id=dungeon_id,
        dungeon_name=f"Dungeon {dungeon_id}",
        enemies_defeated=defeated,
        item_changes={2: 5, 9: -1},
        provider_name=provider,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture(params=["memory", "sqlite"])
def history_store(request, tmp_path):
    if request.param == "memory":
        return create_memory_store()
    return create_sqlite_store(tmp_path / "history.db")


class TestHistoryRecord:
    """Tests for HistoryRecord."""

    def test_generated_id(self):
        """Records get a prefixed unique id."""
        a, b = HistoryRecord(dungeon_id=1), HistoryRecord(dungeon_id=1)
        assert a.record_id.startswith("run_")
        assert a.record_id != b.record_id

    def test_display_name_fallback(self):
        """Unnamed dungeons fall back to their id."""
        assert HistoryRecord(dungeon_id=4).display_name == "Dungeon #4"

    def test_json_keeps_int_item_ids(self):
        """Item ids survive the JSON round trip as ints."""
        record = make_record(0)
        restored = HistoryRecord.from_json(record.to_json())
        assert restored == record
        assert restored.item_changes == {2: 5, 9: -1}


class TestHistoryStores:
    """Behavior shared by both backends."""

    def test_satisfies_protocol(self, history_store):
        """Both backends satisfy HistoryStore."""
        assert isinstance(history_store, HistoryStore)

    def test_save_and_load(self, history_store):
        """Saved records load back unchanged."""
        record = make_record(0)
        history_store.save(record)
        assert history_store.load(record.record_id) == record
        assert history_store.load("run_missing") is None

    def test_append_only(self, history_store):
        """Saving the same id twice is refused."""
        record = make_record(0)
        history_store.save(record)
        with pytest.raises(ValueError, match="already stored"):
            history_store.save(record)
        assert history_store.count() == 1

    def test_query_newest_first(self, history_store):
        """Queries return newest records first."""
        for minutes in (0, 20, 10):
            history_store.save(make_record(minutes))

        results = history_store.query()
        assert [r.timestamp for r in results] == [
            BASE_TIME + timedelta(minutes=20),
            BASE_TIME + timedelta(minutes=10),
            BASE_TIME,
        ]

    def test_query_filters(self, history_store):
        """Dungeon, provider and time filters combine."""
        history_store.save(make_record(0, dungeon_id=1, provider="random"))
        history_store.save(make_record(5, dungeon_id=2, provider="random"))
        history_store.save(make_record(10, dungeon_id=1, provider="manual"))

        assert len(history_store.query(dungeon_id=1)) == 2
        assert len(history_store.query(provider_name="manual")) == 1
        assert len(history_store.query(since=BASE_TIME + timedelta(minutes=5))) == 2
        assert len(history_store.query(dungeon_id=1, provider_name="random")) == 1

    def test_query_limit(self, history_store):
        """Limit caps results; None returns all."""
        for minutes in range(5):
            history_store.save(make_record(minutes))

        assert len(history_store.query(limit=2)) == 2
        assert len(history_store.query(limit=None)) == 5

    def test_clear(self, history_store):
        """Clear removes every record."""
        history_store.save(make_record(0))
        history_store.clear()
        assert history_store.count() == 0


class TestSQLitePersistence:
    """Tests specific to the SQLite backend."""

    def test_survives_reopen(self, tmp_path):
        """Records persist across store instances."""
        path = tmp_path / "runs.db"
        record = make_record(0)
        SQLiteHistoryStore(path).save(record)

        reopened = SQLiteHistoryStore(path)
        assert reopened.count() == 1
        assert reopened.load(record.record_id) == record


class TestCreateHistoryStore:
    """Tests for create_history_store."""

    def test_memory_without_path(self):
        """No path gives an in-memory store."""
        assert isinstance(create_history_store(), InMemoryHistoryStore)

    def test_sqlite_with_path(self, tmp_path):
        """A path gives a SQLite store."""
        assert isinstance(create_history_store(tmp_path / "h.db"), SQLiteHistoryStore)
