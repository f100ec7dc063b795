"""
History Record — persistent summary of one finished run.

Records are append-only: written once when a run ends, never edited.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4


@dataclass(frozen=True)
class HistoryRecord:
    """
    Outcome of a single dungeon run.
    """
    # Identity
    dungeon_id: int
    dungeon_name: str = ""
    juiced: bool = False

    # Outcome
    enemies_defeated: int = 0
    item_changes: dict[int, int] = field(default_factory=dict)  # item id -> net change

    # Context
    provider_name: str = "manual"
    timestamp: datetime = field(default_factory=datetime.now)
    record_id: str = field(default_factory=lambda: f"run_{uuid4().hex[:12]}")

    @property
    def display_name(self) -> str:
        return self.dungeon_name or f"Dungeon #{self.dungeon_id}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "record_id": self.record_id,
            "dungeon_id": self.dungeon_id,
            "dungeon_name": self.dungeon_name,
            "juiced": self.juiced,
            "enemies_defeated": self.enemies_defeated,
            "item_changes": {str(k): v for k, v in self.item_changes.items()},
            "provider_name": self.provider_name,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryRecord":
        """Deserialize from dictionary."""
        return cls(
            record_id=data["record_id"],
            dungeon_id=int(data["dungeon_id"]),
            dungeon_name=data.get("dungeon_name", ""),
            juiced=bool(data.get("juiced", False)),
            enemies_defeated=int(data.get("enemies_defeated", 0)),
            item_changes={int(k): int(v) for k, v in data.get("item_changes", {}).items()},
            provider_name=data.get("provider_name", "manual"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "HistoryRecord":
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))
