"""Read-only integration tests against the live game API."""

import asyncio

import pytest

from teraverse.schemas import RunState


@pytest.mark.integration
class TestLiveReads:
    """Tests for live read endpoints."""

    def test_energy(self, live_client, live_address):
        """Energy parses with a positive capacity."""
        energy = asyncio.run(live_client.get_energy(live_address))
        assert energy.capacity > 0
        assert energy.visible <= energy.capacity

    def test_today_dungeons(self, live_client):
        """Today's catalog lists at least one dungeon."""
        dungeons = asyncio.run(live_client.get_today_dungeons())
        assert len(dungeons) > 0
        assert all(d.energy_cost >= 0 for d in dungeons)

    def test_run_state(self, live_client):
        """The run endpoint returns a run or nothing."""
        state = asyncio.run(live_client.fetch_run_state())
        assert state is None or isinstance(state, RunState)

    def test_claimables(self, live_client, live_address):
        """ROM listing parses."""
        roms = asyncio.run(live_client.get_claimables(live_address))
        assert all(rom.id for rom in roms)
