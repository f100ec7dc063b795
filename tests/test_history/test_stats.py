"""Tests for run statistics."""

import pytest

from teraverse.history import HistoryRecord, aggregate_item_changes, summarize_history


def record(dungeon_id: int, provider: str, defeated: int, items=None):
    return HistoryRecord(
        dungeon_id=dungeon_id,
        dungeon_name=f"D{dungeon_id}",
        enemies_defeated=defeated,
        provider_name=provider,
        item_changes=items or {},
    )


class TestSummarizeHistory:
    """Tests for summarize_history."""

    def test_empty(self):
        """No records, no stats."""
        assert summarize_history([]) == []

    def test_grouped_by_dungeon_in_id_order(self):
        """One entry per dungeon, ordered by dungeon id."""
        stats = summarize_history([
            record(3, "random", 2),
            record(1, "random", 4),
            record(3, "manual", 6),
        ])

        assert [s.dungeon_id for s in stats] == [1, 3]
        assert stats[1].total_runs == 2
        assert stats[1].average_defeated == pytest.approx(4.0)
        assert stats[1].display_name == "D3"

    def test_ranked_providers(self):
        """Providers are ranked by average enemies defeated."""
        stats = summarize_history([
            record(1, "random", 2),
            record(1, "random", 4),
            record(1, "engine", 9),
        ])[0]

        ranked = stats.ranked_providers()
        assert [p.provider_name for p in ranked] == ["engine", "random"]
        assert ranked[1].runs == 2
        assert ranked[1].average_defeated == pytest.approx(3.0)


class TestAggregateItemChanges:
    """Tests for aggregate_item_changes."""

    def test_sums_across_runs(self):
        """Net change per item across records."""
        totals = aggregate_item_changes([
            record(1, "random", 1, {2: 5, 3: -1}),
            record(2, "random", 1, {2: -2}),
        ])
        assert totals == {2: 3, 3: -1}
