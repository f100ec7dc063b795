"""
Run Ledger — Tracks per-run bookkeeping.

Maintains running state for a single dungeon run:
- Dungeon identity and mode
- Item balance deltas from every move
- Move counts
- Whether the run's history record has been written
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from teraverse.schemas import ItemDelta


@dataclass
class RunLedger:
    """
    Bookkeeping for the run currently being played.

    Created when a run starts (or when an already-running run is first
    seen) and finalized once its history record is written.
    """
    # Identity
    dungeon_id: int
    dungeon_name: str = ""
    juiced: bool = False
    provider_name: str = "manual"

    # Lifecycle
    started_at: datetime = field(default_factory=datetime.now)
    finalized_at: datetime | None = None

    # Item deltas, in arrival order
    deltas: list[ItemDelta] = field(default_factory=list)

    # Move tracking
    moves_submitted: int = 0
    moves_failed: int = 0

    @property
    def finalized(self) -> bool:
        return self.finalized_at is not None

    def add_deltas(self, deltas: list[ItemDelta]) -> None:
        """Merge item balance changes from one move response."""
        self.deltas.extend(deltas)

    def aggregated_changes(self) -> dict[int, int]:
        """Net change per item id over the whole run."""
        totals: dict[int, int] = {}
        for delta in self.deltas:
            totals[delta.item_id] = totals.get(delta.item_id, 0) + delta.amount
        return totals

    def record_move(self, success: bool) -> None:
        if success:
            self.moves_submitted += 1
        else:
            self.moves_failed += 1

    def finalize(self) -> None:
        """Mark the run as recorded."""
        self.finalized_at = datetime.now()

    def to_summary(self) -> dict[str, Any]:
        """Generate a summary for logging/debugging."""
        return {
            "dungeon_id": self.dungeon_id,
            "dungeon_name": self.dungeon_name,
            "juiced": self.juiced,
            "provider": self.provider_name,
            "moves": f"{self.moves_submitted} ok / {self.moves_failed} failed",
            "items": self.aggregated_changes(),
            "finalized": self.finalized,
        }


def create_ledger(
    dungeon_id: int,
    dungeon_name: str = "",
    juiced: bool = False,
    provider_name: str = "manual",
) -> RunLedger:
    """Factory for run ledger."""
    return RunLedger(
        dungeon_id=dungeon_id,
        dungeon_name=dungeon_name or f"Dungeon #{dungeon_id}",
        juiced=juiced,
        provider_name=provider_name,
    )
