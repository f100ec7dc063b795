"""
Run state — snapshot of one in-progress dungeon run.

Parsed from the server's dungeon document, which carries a `run` block
(players, loot phase) and an `entity` block (dungeon id, room, completion).
A null `run` block means the server reports no active run, whatever the
entity block still says.
"""

from typing import Any

from pydantic import BaseModel, Field


class ItemDelta(BaseModel):
    """
    A single item balance change reported with a move response.
    """
    item_id: int = Field(
        ...,
        description="Game item identifier"
    )

    amount: int = Field(
        ...,
        description="Net change; negative for consumption"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ItemDelta":
        return cls(item_id=int(data["id"]), amount=int(data["amount"]))


class RunState(BaseModel):
    """
    Immutable snapshot of an active run.

    A new snapshot replaces the old one after every server response;
    no field is ever mutated in place.
    """
    entity_id: str | None = Field(
        default=None,
        description="Backing entity id; None means no active run"
    )

    dungeon_id: int = Field(
        default=0,
        ge=0,
        description="Dungeon this run belongs to"
    )

    room_number: int = Field(
        default=1,
        ge=0,
        description="Current room, non-decreasing within a run"
    )

    player_health: int = Field(
        default=0,
        description="Current player health"
    )

    player_max_health: int = Field(
        default=0,
        ge=0,
        description="Player health cap"
    )

    completion_flag: bool = Field(
        default=False,
        description="Server marked the dungeon as complete"
    )

    loot_phase: bool = Field(
        default=False,
        description="Next actions are loot picks rather than combat moves"
    )

    loot_option_count: int = Field(
        default=0,
        ge=0,
        description="Number of loot options on offer"
    )

    model_config = {"frozen": True}

    @property
    def enemies_defeated(self) -> int:
        return max(0, self.room_number - 1)

    @property
    def is_over(self) -> bool:
        """Locally detectable end of run: dead or completed."""
        return self.player_health <= 0 or self.completion_flag

    @property
    def in_loot_phase(self) -> bool:
        """Loot picks are only possible when options are actually offered."""
        return self.loot_phase and self.loot_option_count > 0

    @classmethod
    def from_dungeon_data(cls, data: dict[str, Any] | None) -> "RunState | None":
        """
        Parse the server's dungeon document.

        Returns None when the document or its `run` block is missing; an
        entity block on its own is not a run.
        """
        if not data:
            return None

        run = data.get("run")
        entity = data.get("entity")
        if not run:
            return None

        entity = entity or {}

        players = run.get("players") or []
        health = (players[0].get("health") or {}) if players else {}
        loot_options = run.get("lootOptions") or []

        entity_id = entity.get("docId") or entity.get("ID_CID")

        return cls(
            entity_id=str(entity_id) if entity_id is not None else None,
            dungeon_id=int(entity.get("ID_CID") or 0),
            room_number=int(entity.get("ROOM_NUM_CID") or 1),
            player_health=int(health.get("current") or 0),
            player_max_health=int(health.get("currentMax") or 0),
            completion_flag=bool(entity.get("COMPLETE_CID")),
            loot_phase=bool(run.get("lootPhase")),
            loot_option_count=len(loot_options),
        )
