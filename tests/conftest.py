"""Shared fixtures."""

import logging

import pytest

from teraverse.clients import FakeGameAPI
from teraverse.observability import reset_activity_context, reset_metrics
from teraverse.schemas import ClaimableObject, DungeonInfo, EnergyState, RunState, to_raw
from teraverse.state import GameStore


@pytest.fixture(autouse=True)
def clean_observability():
    """Fresh metrics, no bound context and no leftover log handlers for every test."""
    reset_metrics()
    reset_activity_context()
    yield
    reset_metrics()
    logging.getLogger("teraverse").handlers.clear()


@pytest.fixture
def dungeon():
    return DungeonInfo(
        dungeon_id=1,
        name="Dungetron 5000",
        energy_cost=40,
        max_runs_per_day=10,
        juiced_max_runs_per_day=30,
    )


@pytest.fixture
def energy():
    return EnergyState(
        raw_value=to_raw(100),
        capacity=240,
        regen_per_second=1_000_000.0,
    )


@pytest.fixture
def roms():
    return [
        ClaimableObject(id="rom-a", dust_yield=10, shard_yield=1, energy_yield=50),
        ClaimableObject(id="rom-b", dust_yield=30, energy_yield=30),
        ClaimableObject(id="rom-c", shard_yield=4, energy_yield=10),
        ClaimableObject(id="rom-d"),
    ]


@pytest.fixture
def fake_api(dungeon, energy, roms):
    return FakeGameAPI(energy=energy, claimables=roms, dungeons=[dungeon])


@pytest.fixture
def store():
    return GameStore(address="0xplayer")


@pytest.fixture
def live_run():
    return RunState(
        entity_id="run-1",
        dungeon_id=1,
        room_number=3,
        player_health=12,
        player_max_health=20,
    )
