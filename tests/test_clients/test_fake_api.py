"""Tests for the in-memory fake game server."""

import asyncio

import pytest

from teraverse.clients import FakeGameAPI, GameAPI, MoveOutcome
from teraverse.exceptions import APIError
from teraverse.schemas import to_raw
from teraverse.vocabulary import ClaimCategory, Move


class TestFakeGameAPI:
    """Tests for FakeGameAPI."""

    def test_satisfies_protocol(self, fake_api):
        """The fake is a GameAPI."""
        assert isinstance(fake_api, GameAPI)

    def test_start_run_costs_energy(self, fake_api):
        """Starting deducts energy and counts the run."""
        response = asyncio.run(fake_api.start_run(1, False, ""))

        assert response.run_state.room_number == 1
        assert response.action_token == "tok-1"
        assert fake_api.energy.visible == 60
        assert fake_api.day_progress == {1: 1}

    def test_only_one_run(self, fake_api):
        """A second start while a run is active is rejected."""
        async def scenario():
            first = await fake_api.start_run(1, False, "")
            await fake_api.start_run(1, False, first.action_token)

        with pytest.raises(APIError, match="already active"):
            asyncio.run(scenario())

    def test_stale_token_rejected(self, fake_api):
        """Moves with an old token fail."""
        async def scenario():
            await fake_api.start_run(1, False, "")
            await fake_api.submit_move(Move.ROCK, 1, "tok-0")

        with pytest.raises(APIError) as exc_info:
            asyncio.run(scenario())
        assert exc_info.value.status_code == 409

    def test_scripted_moves(self, fake_api):
        """Scripted outcomes drive the run."""
        fake_api.script_moves([MoveOutcome(room_delta=0, health_delta=-5, loot_options=3)])

        async def scenario():
            start = await fake_api.start_run(1, False, "")
            return await fake_api.submit_move(Move.PAPER, 1, start.action_token)

        response = asyncio.run(scenario())

        assert response.run_state.player_health == 15
        assert response.run_state.in_loot_phase is True
        assert response.run_state.loot_option_count == 3

    def test_energy_claim_capped(self, fake_api):
        """Energy claims never exceed capacity."""
        fake_api.energy = fake_api.energy.model_copy(update={"raw_value": to_raw(230)})

        ok = asyncio.run(fake_api.claim("rom-a", ClaimCategory.ENERGY))

        assert ok is True
        assert fake_api.energy.visible == 240
        assert fake_api.roms["rom-a"].energy_yield == 0

    def test_unknown_rom(self, fake_api):
        """Claiming an unknown ROM is an error."""
        with pytest.raises(APIError):
            asyncio.run(fake_api.claim("nope", ClaimCategory.DUST))

    def test_injected_failure_then_recovery(self, fake_api):
        """Injected failures are consumed one call at a time."""
        fake_api.fail_next("get_energy")

        async def scenario():
            with pytest.raises(APIError):
                await fake_api.get_energy("0x1")
            return await fake_api.get_energy("0x1")

        assert asyncio.run(scenario()) == fake_api.energy
        assert len(fake_api.calls_to("get_energy")) == 2

    def test_default_instance(self):
        """A bare fake has energy and nothing else."""
        api = FakeGameAPI()
        assert api.energy.visible == 100
        assert asyncio.run(api.fetch_run_state()) is None
