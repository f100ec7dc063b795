"""Tests for server payload parsing."""

import pytest
from pydantic import ValidationError

from teraverse.schemas import (
    ENERGY_SCALE,
    ClaimableObject,
    DungeonInfo,
    EnergyState,
    ItemDelta,
    RunState,
    to_raw,
    to_visible,
    total_yield,
)
from teraverse.vocabulary import ClaimCategory


def dungeon_doc(health=20, room=3, complete=False, loot_phase=False, loot_options=0):
    return {
        "run": {
            "players": [{"health": {"current": health, "currentMax": 20}}],
            "lootPhase": loot_phase,
            "lootOptions": [{} for _ in range(loot_options)],
        },
        "entity": {
            "docId": "entity-9",
            "ID_CID": "2",
            "ROOM_NUM_CID": room,
            "COMPLETE_CID": complete,
        },
    }


class TestRunState:
    """Tests for run state parsing."""

    def test_parses_dungeon_document(self):
        """Health, room and dungeon id come from run and entity blocks."""
        state = RunState.from_dungeon_data(dungeon_doc(health=7, room=4))

        assert state.entity_id == "entity-9"
        assert state.dungeon_id == 2
        assert state.room_number == 4
        assert state.player_health == 7
        assert state.player_max_health == 20

    def test_both_blocks_null_is_no_run(self):
        """Null run and entity means no active run."""
        assert RunState.from_dungeon_data({"run": None, "entity": None}) is None
        assert RunState.from_dungeon_data(None) is None
        assert RunState.from_dungeon_data({}) is None

    def test_entity_without_run_is_no_run(self):
        """A leftover entity with a null run block is not a run."""
        doc = {"run": None, "entity": {"docId": "e1", "ID_CID": 1, "ROOM_NUM_CID": 3}}
        assert RunState.from_dungeon_data(doc) is None

    def test_enemies_defeated(self):
        """Enemies defeated is room minus one, never negative."""
        assert RunState(room_number=4).enemies_defeated == 3
        assert RunState(room_number=1).enemies_defeated == 0
        assert RunState(room_number=0).enemies_defeated == 0

    def test_is_over(self):
        """Zero health or completion ends the run."""
        assert RunState.from_dungeon_data(dungeon_doc(health=0)).is_over is True
        assert RunState.from_dungeon_data(dungeon_doc(complete=True)).is_over is True
        assert RunState.from_dungeon_data(dungeon_doc()).is_over is False

    def test_loot_phase_requires_options(self):
        """Loot phase without options is not actionable."""
        empty = RunState.from_dungeon_data(dungeon_doc(loot_phase=True))
        offered = RunState.from_dungeon_data(dungeon_doc(loot_phase=True, loot_options=3))

        assert empty.in_loot_phase is False
        assert offered.in_loot_phase is True
        assert offered.loot_option_count == 3

    def test_frozen(self):
        """Snapshots are immutable."""
        state = RunState(room_number=2)
        with pytest.raises(ValidationError):
            state.room_number = 3

    def test_item_delta_from_api(self):
        """Balance change entries parse to item deltas."""
        delta = ItemDelta.from_api({"id": "21", "amount": -2})
        assert delta.item_id == 21
        assert delta.amount == -2


class TestEnergyState:
    """Tests for energy parsing and fixed point."""

    def test_scale_helpers(self):
        """Visible energy is the integer part of the raw value."""
        assert to_raw(5) == 5 * ENERGY_SCALE
        assert to_visible(to_raw(5) + ENERGY_SCALE - 1) == 5

    def test_from_entities_response(self):
        """Parsed data is read from the first entity."""
        energy = EnergyState.from_api({
            "entities": [{
                "parsedData": {
                    "energy": str(to_raw(120) + 5),
                    "maxEnergy": 240,
                    "regenPerSecond": 2777777.7,
                    "isPlayerJuiced": True,
                },
            }],
        })

        assert energy.visible == 120
        assert energy.capacity == 240
        assert energy.is_boosted is True
        assert energy.regen_per_second == pytest.approx(2777777.7)

    def test_is_full(self):
        """Full at capacity in raw units."""
        assert EnergyState(raw_value=to_raw(240), capacity=240).is_full is True
        assert EnergyState(raw_value=to_raw(239), capacity=240).is_full is False

    def test_rejects_negative_raw(self):
        """Raw energy cannot be negative."""
        with pytest.raises(ValidationError):
            EnergyState(raw_value=-1, capacity=10)


class TestClaimableObject:
    """Tests for ROM parsing."""

    def test_from_api(self):
        """Factory stats map to per-category yields."""
        rom = ClaimableObject.from_api({
            "docId": "rom-7",
            "factoryStats": {
                "dustCollectable": 12,
                "shardCollectable": 0,
                "energyCollectable": 33,
            },
        })

        assert rom.id == "rom-7"
        assert rom.yield_for(ClaimCategory.DUST) == 12
        assert rom.yield_for(ClaimCategory.SHARD) == 0
        assert rom.yield_for(ClaimCategory.ENERGY) == 33

    def test_total_yield(self, roms):
        """Yields sum per category."""
        assert total_yield(roms, ClaimCategory.ENERGY) == 90
        assert total_yield(roms, ClaimCategory.SHARD) == 5


class TestDungeonInfo:
    """Tests for dungeon catalog entries."""

    def test_from_api(self):
        """Catalog fields use the game's component ids."""
        dungeon = DungeonInfo.from_api({
            "ID_CID": 3,
            "NAME_CID": "Underhaul",
            "ENERGY_CID": 40,
            "UINT256_CID": 10,
            "juicedMaxRunsPerDay": 30,
        })

        assert dungeon.dungeon_id == 3
        assert dungeon.display_name == "Underhaul"
        assert dungeon.juiced_energy_cost == 120

    def test_display_name_fallback(self):
        """Unnamed dungeons show their id."""
        assert DungeonInfo(dungeon_id=4).display_name == "Dungeon #4"
