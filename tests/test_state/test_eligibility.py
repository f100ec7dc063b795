"""Tests for run eligibility."""

from teraverse.state import (
    can_start_run,
    effective_max_runs,
    ineligibility_reason,
    run_slots,
)


class TestNormalRuns:
    """Tests for normal run starts."""

    def test_allowed_with_slot_and_energy(self, dungeon):
        """A free slot and enough energy allows a start."""
        assert can_start_run(dungeon, runs_used=0, visible_energy=40, is_boosted=False) is True

    def test_not_enough_energy(self, dungeon):
        """Energy below cost refuses the start."""
        assert can_start_run(dungeon, runs_used=0, visible_energy=39, is_boosted=False) is False
        reason = ineligibility_reason(dungeon, 0, 39, False)
        assert "Not enough energy" in reason

    def test_daily_limit(self, dungeon):
        """Used-up daily slots refuse the start."""
        assert can_start_run(dungeon, runs_used=10, visible_energy=200, is_boosted=False) is False
        assert "Daily run limit" in ineligibility_reason(dungeon, 10, 200, False)

    def test_boost_raises_limit(self, dungeon):
        """Boosted players use the juiced daily limit."""
        assert effective_max_runs(dungeon, is_boosted=True) == 30
        assert can_start_run(dungeon, runs_used=10, visible_energy=200, is_boosted=True) is True


class TestJuicedRuns:
    """Tests for juiced run starts."""

    def test_requires_boost(self, dungeon):
        """Juiced runs need the boost."""
        assert can_start_run(dungeon, 0, 500, is_boosted=False, juiced=True) is False
        assert "boost" in ineligibility_reason(dungeon, 0, 500, False, juiced=True)

    def test_triple_energy(self, dungeon):
        """Juiced runs cost three times the energy."""
        assert can_start_run(dungeon, 0, 119, is_boosted=True, juiced=True) is False
        assert can_start_run(dungeon, 0, 120, is_boosted=True, juiced=True) is True

    def test_three_slots(self, dungeon):
        """Juiced runs need three free slots under the juiced limit."""
        assert can_start_run(dungeon, 27, 500, is_boosted=True, juiced=True) is True
        assert can_start_run(dungeon, 28, 500, is_boosted=True, juiced=True) is False

    def test_run_slots(self):
        """Slots consumed per start."""
        assert run_slots(juiced=False) == 1
        assert run_slots(juiced=True) == 3

    def test_eligible_has_no_reason(self, dungeon):
        """Allowed starts have no refusal reason."""
        assert ineligibility_reason(dungeon, 0, 120, True, juiced=True) is None
