"""Tests for the shared game store."""

from teraverse.state import ActionTokenTracker, GameStore, create_ledger


class TestGameStore:
    """Tests for GameStore."""

    def test_starts_empty(self, store):
        """New store has no snapshots."""
        assert store.run_state is None
        assert store.energy is None
        assert store.claimables == []
        assert store.visible_energy == 0
        assert store.has_active_run is False

    def test_run_state_replaced(self, store, live_run):
        """Run snapshot is replaced and timestamped."""
        store.set_run_state(live_run)
        assert store.run_state is live_run
        assert store.has_active_run is True
        assert store.run_state_updated_at is not None

        store.set_run_state(None)
        assert store.has_active_run is False

    def test_energy(self, store, energy):
        """Visible energy comes from the snapshot."""
        store.set_energy(energy)
        assert store.visible_energy == 100

    def test_claimables_copied(self, store, roms):
        """Callers cannot mutate the stored list."""
        store.set_claimables(roms)
        store.claimables.clear()
        assert len(store.claimables) == 4

    def test_catalog_and_progress(self, store, dungeon):
        """Dungeon lookup and run counting."""
        store.set_dungeons([dungeon])
        store.set_day_progress({1: 2})
        store.increment_run_count(1, 3)

        assert store.get_dungeon(1) == dungeon
        assert store.dungeon_name(1) == "Dungetron 5000"
        assert store.dungeon_name(9) == "Dungeon #9"
        assert store.runs_used(1) == 5
        assert store.runs_used(9) == 0

    def test_errors(self, store):
        """Last error is set and cleared."""
        store.set_error("boom")
        assert store.last_error == "boom"
        store.clear_error()
        assert store.last_error is None

    def test_reset(self, energy, live_run):
        """Reset drops snapshots and the token."""
        store = GameStore(address="0x1", tracker=ActionTokenTracker(initial="t"))
        store.set_energy(energy)
        store.set_run_state(live_run)
        store.set_ledger(create_ledger(1))
        store.reset()

        assert store.energy is None
        assert store.run_state is None
        assert store.ledger is None
        assert store.token.current is None
