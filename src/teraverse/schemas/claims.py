"""
Claimable objects — owned ROMs accumulating yield.
"""

from typing import Any

from pydantic import BaseModel, Field

from teraverse.vocabulary import ClaimCategory


class ClaimableObject(BaseModel):
    """
    A ROM and what it can currently yield per category.
    """
    id: str = Field(
        ...,
        min_length=1,
        description="ROM identifier used in the claim call"
    )

    dust_yield: int = Field(default=0, ge=0)
    shard_yield: int = Field(default=0, ge=0)
    energy_yield: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    def yield_for(self, category: ClaimCategory) -> int:
        if category == ClaimCategory.DUST:
            return self.dust_yield
        if category == ClaimCategory.SHARD:
            return self.shard_yield
        return self.energy_yield

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ClaimableObject":
        stats = data.get("factoryStats") or data
        return cls(
            id=str(data.get("docId") or data["id"]),
            dust_yield=max(0, int(stats.get("dustCollectable") or 0)),
            shard_yield=max(0, int(stats.get("shardCollectable") or 0)),
            energy_yield=max(0, int(stats.get("energyCollectable") or 0)),
        )


def total_yield(objects: list[ClaimableObject], category: ClaimCategory) -> int:
    """Sum of claimable yield for one category."""
    return sum(obj.yield_for(category) for obj in objects)
