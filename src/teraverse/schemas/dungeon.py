"""
Dungeon catalog entries — today's dungeons and their costs and limits.
"""

from typing import Any

from pydantic import BaseModel, Field


JUICED_MULTIPLIER = 3


class DungeonInfo(BaseModel):
    """
    Static daily data for one dungeon.

    A juiced run costs three times the energy and counts as three runs
    against the daily limit.
    """
    dungeon_id: int = Field(..., ge=0)
    name: str = Field(default="")
    energy_cost: int = Field(default=0, ge=0)
    max_runs_per_day: int = Field(default=0, ge=0)
    juiced_max_runs_per_day: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @property
    def juiced_energy_cost(self) -> int:
        return self.energy_cost * JUICED_MULTIPLIER

    @property
    def display_name(self) -> str:
        return self.name or f"Dungeon #{self.dungeon_id}"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "DungeonInfo":
        return cls(
            dungeon_id=int(data["ID_CID"]),
            name=str(data.get("NAME_CID") or ""),
            energy_cost=int(data.get("ENERGY_CID") or 0),
            max_runs_per_day=int(data.get("UINT256_CID") or 0),
            juiced_max_runs_per_day=int(data.get("juicedMaxRunsPerDay") or 0),
        )
