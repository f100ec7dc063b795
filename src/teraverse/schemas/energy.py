"""
Energy state — server-authoritative regenerating resource.

The raw value is a fixed-point integer scaled by ENERGY_SCALE; the visible
energy is the integer part. Capacity is reported in visible units.
"""

from typing import Any

from pydantic import BaseModel, Field


ENERGY_SCALE = 1_000_000_000


def to_visible(raw_value: int) -> int:
    """Convert a fixed-point raw value to visible energy units."""
    return raw_value // ENERGY_SCALE


def to_raw(visible: int) -> int:
    """Convert visible energy units to the fixed-point raw value."""
    return visible * ENERGY_SCALE


class EnergyState(BaseModel):
    """
    Snapshot of the player's energy.

    Replaced wholesale on every refresh; the client never decrements it.
    """
    raw_value: int = Field(
        ...,
        ge=0,
        description="Fixed-point energy, scaled by ENERGY_SCALE"
    )

    capacity: int = Field(
        ...,
        ge=0,
        description="Maximum energy in visible units"
    )

    regen_per_second: float = Field(
        default=0.0,
        description="Regeneration in raw units per second"
    )

    is_boosted: bool = Field(
        default=False,
        description="Player has the juiced boost active"
    )

    model_config = {"frozen": True}

    @property
    def visible(self) -> int:
        return to_visible(self.raw_value)

    @property
    def capacity_raw(self) -> int:
        return to_raw(self.capacity)

    @property
    def is_full(self) -> bool:
        return self.raw_value >= self.capacity_raw

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "EnergyState":
        """
        Parse an energy response.

        Accepts either the parsed-data block itself or the full response
        with an `entities` list wrapping it.
        """
        parsed = data
        entities = data.get("entities")
        if entities:
            parsed = entities[0].get("parsedData") or entities[0]
        elif "parsedData" in data:
            parsed = data["parsedData"]

        return cls(
            raw_value=int(parsed.get("energy") or 0),
            capacity=int(parsed.get("maxEnergy") or 0),
            regen_per_second=float(parsed.get("regenPerSecond") or 0.0),
            is_boosted=bool(parsed.get("isPlayerJuiced")),
        )
