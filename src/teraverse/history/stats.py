"""
Run statistics — per-dungeon aggregates over history records.
"""

from dataclasses import dataclass, field

from teraverse.history.record import HistoryRecord


@dataclass
class ProviderStats:
    """Aggregate for one provider within one dungeon."""
    provider_name: str
    runs: int = 0
    total_defeated: int = 0

    @property
    def average_defeated(self) -> float:
        return self.total_defeated / self.runs if self.runs else 0.0


@dataclass
class DungeonStats:
    """Aggregate for one dungeon, with a per-provider breakdown."""
    dungeon_id: int
    dungeon_name: str = ""
    total_runs: int = 0
    total_defeated: int = 0
    by_provider: dict[str, ProviderStats] = field(default_factory=dict)

    @property
    def average_defeated(self) -> float:
        return self.total_defeated / self.total_runs if self.total_runs else 0.0

    @property
    def display_name(self) -> str:
        return self.dungeon_name or f"Dungeon #{self.dungeon_id}"

    def ranked_providers(self) -> list[ProviderStats]:
        """Providers by average enemies defeated, best first."""
        return sorted(
            self.by_provider.values(),
            key=lambda p: p.average_defeated,
            reverse=True,
        )


def summarize_history(records: list[HistoryRecord]) -> list[DungeonStats]:
    """Group records by dungeon, ordered by dungeon id."""
    stats: dict[int, DungeonStats] = {}

    for record in records:
        dungeon = stats.get(record.dungeon_id)
        if dungeon is None:
            dungeon = DungeonStats(
                dungeon_id=record.dungeon_id,
                dungeon_name=record.dungeon_name,
            )
            stats[record.dungeon_id] = dungeon
        dungeon.total_runs += 1
        dungeon.total_defeated += record.enemies_defeated

        provider = dungeon.by_provider.setdefault(
            record.provider_name,
            ProviderStats(provider_name=record.provider_name),
        )
        provider.runs += 1
        provider.total_defeated += record.enemies_defeated

    return [stats[dungeon_id] for dungeon_id in sorted(stats)]


def aggregate_item_changes(records: list[HistoryRecord]) -> dict[int, int]:
    """Net item change per item id across many runs."""
    totals: dict[int, int] = {}
    for record in records:
        for item_id, amount in record.item_changes.items():
            totals[item_id] = totals.get(item_id, 0) + amount
    return totals
