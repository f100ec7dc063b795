"""
Run eligibility — whether a dungeon run may be started right now.

A normal run needs one daily slot and the dungeon's energy cost. A juiced
run needs the boost, three daily slots under the juiced limit and three
times the energy.
"""

from teraverse.schemas import DungeonInfo, JUICED_MULTIPLIER


def effective_max_runs(dungeon: DungeonInfo, is_boosted: bool) -> int:
    """Daily run limit that applies to this player."""
    if is_boosted:
        return dungeon.juiced_max_runs_per_day
    return dungeon.max_runs_per_day


def can_start_run(
    dungeon: DungeonInfo,
    runs_used: int,
    visible_energy: int,
    is_boosted: bool,
    juiced: bool = False,
) -> bool:
    """Check daily limits and energy for a normal or juiced start."""
    if juiced:
        return (
            is_boosted
            and runs_used + JUICED_MULTIPLIER <= dungeon.juiced_max_runs_per_day
            and visible_energy >= dungeon.juiced_energy_cost
        )
    return (
        runs_used < effective_max_runs(dungeon, is_boosted)
        and visible_energy >= dungeon.energy_cost
    )


def ineligibility_reason(
    dungeon: DungeonInfo,
    runs_used: int,
    visible_energy: int,
    is_boosted: bool,
    juiced: bool = False,
) -> str | None:
    """Human-readable reason a start is refused, or None if allowed."""
    if can_start_run(dungeon, runs_used, visible_energy, is_boosted, juiced):
        return None
    if juiced and not is_boosted:
        return "Juiced runs require an active boost"
    cost = dungeon.juiced_energy_cost if juiced else dungeon.energy_cost
    if visible_energy < cost:
        return f"Not enough energy: {visible_energy} < {cost}"
    return f"Daily run limit reached for {dungeon.display_name}"


def run_slots(juiced: bool) -> int:
    """Daily slots consumed by one start."""
    return JUICED_MULTIPLIER if juiced else 1
