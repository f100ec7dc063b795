"""
Schemas — pydantic models for server-reported state.

- RunState / ItemDelta: dungeon run snapshots and move side effects
- EnergyState: fixed-point regenerating energy
- ClaimableObject: ROM yields per claim category
- DungeonInfo: today's dungeon catalog
"""

from teraverse.schemas.run import ItemDelta, RunState
from teraverse.schemas.energy import (
    ENERGY_SCALE,
    EnergyState,
    to_raw,
    to_visible,
)
from teraverse.schemas.claims import ClaimableObject, total_yield
from teraverse.schemas.dungeon import DungeonInfo, JUICED_MULTIPLIER

__all__ = [
    "ItemDelta",
    "RunState",
    "ENERGY_SCALE",
    "EnergyState",
    "to_raw",
    "to_visible",
    "ClaimableObject",
    "total_yield",
    "DungeonInfo",
    "JUICED_MULTIPLIER",
]
