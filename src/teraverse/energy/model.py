"""
Energy Model — predicts when visible energy next ticks up.

Pure computation over the fixed-point energy value; no I/O.
"""

from teraverse.schemas.energy import ENERGY_SCALE, EnergyState, to_raw, to_visible


DEFAULT_MIN_DELAY = 0.1


def next_boundary_delay(
    raw_value: int,
    capacity: int,
    regen_per_second: float,
    *,
    min_delay: float = DEFAULT_MIN_DELAY,
) -> float | None:
    """
    Seconds until the raw value crosses the next visible-unit boundary.

    Args:
        raw_value: Fixed-point energy
        capacity: Maximum energy in visible units
        regen_per_second: Regeneration in raw units per second
        min_delay: Lower clamp on the returned delay

    Returns:
        Delay in seconds, or None when nothing will change (full or not
        regenerating) or the boundary has already been reached. In the
        last case the caller should refresh right away.
    """
    if raw_value >= capacity * ENERGY_SCALE:
        return None
    if regen_per_second <= 0:
        return None

    unit = raw_value // ENERGY_SCALE
    boundary = (unit + 1) * ENERGY_SCALE
    diff = boundary - raw_value
    if diff <= 0:
        return None

    return max(min_delay, diff / regen_per_second)


def delay_for_state(
    state: EnergyState | None,
    *,
    min_delay: float = DEFAULT_MIN_DELAY,
) -> float | None:
    """`next_boundary_delay` for a stored snapshot (None when unknown)."""
    if state is None:
        return None
    return next_boundary_delay(
        state.raw_value,
        state.capacity,
        state.regen_per_second,
        min_delay=min_delay,
    )


def seconds_until_full(state: EnergyState) -> float | None:
    """Time to reach capacity at the current rate; None if it never will."""
    if state.is_full:
        return 0.0
    if state.regen_per_second <= 0:
        return None
    return (state.capacity_raw - state.raw_value) / state.regen_per_second


__all__ = [
    "ENERGY_SCALE",
    "DEFAULT_MIN_DELAY",
    "next_boundary_delay",
    "delay_for_state",
    "seconds_until_full",
    "to_raw",
    "to_visible",
]
