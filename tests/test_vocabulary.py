"""Tests for vocabulary enums."""

from teraverse.vocabulary import (
    COMBAT_MOVES,
    LOOT_MOVES,
    ClaimCategory,
    LoopExitReason,
    Move,
    ProviderKind,
    SchedulerState,
)


class TestMove:
    """Tests for Move enum."""

    def test_wire_values(self):
        """Move values are the action names the server expects."""
        assert Move.ROCK.value == "rock"
        assert Move.SCISSOR.value == "scissor"
        assert Move.PICK_LOOT_TWO.value == "loot_two"

    def test_combat_and_loot_partition(self):
        """Every move is either combat or loot."""
        assert set(COMBAT_MOVES) | set(LOOT_MOVES) == set(Move)
        assert not set(COMBAT_MOVES) & set(LOOT_MOVES)

    def test_is_loot_pick(self):
        """Loot picks are flagged."""
        assert Move.PICK_LOOT_ONE.is_loot_pick is True
        assert Move.PAPER.is_loot_pick is False

    def test_from_string(self):
        """Moves parse from their string value."""
        assert Move("paper") is Move.PAPER


class TestOtherEnums:
    """Tests for state and category enums."""

    def test_claim_categories(self):
        """Three claim categories."""
        assert {c.value for c in ClaimCategory} == {"dust", "shard", "energy"}

    def test_scheduler_states(self):
        """Scheduler has three states."""
        assert len(SchedulerState) == 3

    def test_provider_kinds(self):
        """Provider kinds match registry names."""
        assert ProviderKind("random") is ProviderKind.RANDOM

    def test_exit_reasons_are_strings(self):
        """Exit reasons compare equal to their names."""
        assert LoopExitReason.RUN_ENDED == "RUN_ENDED"
