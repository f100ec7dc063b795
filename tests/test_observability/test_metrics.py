"""Tests for metrics collection."""

import asyncio

from teraverse.observability import (
    Counter,
    Gauge,
    LatencyTracker,
    get_metrics,
    reset_metrics,
)
from teraverse.orchestrator import create_claim_orchestrator, create_runner
from teraverse.providers import CallableProvider
from teraverse.schemas import RunState
from teraverse.vocabulary import ClaimCategory, Move


class TestCounter:
    """Tests for Counter metric."""

    def test_starts_at_zero(self):
        """Counter starts at zero."""
        assert Counter("test", "Test counter").value == 0

    def test_labels_add_to_total(self):
        """Labelled increments are counted in the total and per label."""
        counter = Counter("moves")
        counter.inc(label="rock")
        counter.inc(2, label="paper")
        counter.inc()

        assert counter.value == 4
        assert counter.get("paper") == 2
        assert counter.get("scissor") == 0
        assert counter.by_label() == {"rock": 1, "paper": 2}

    def test_reset(self):
        """Reset clears the total and the breakdown."""
        counter = Counter("test")
        counter.inc(10, label="x")
        counter.reset()
        assert counter.export() == {"total": 0.0}


class TestGauge:
    """Tests for Gauge metric."""

    def test_unknown_until_set(self):
        """A gauge reads None before its first observation."""
        gauge = Gauge("energy")
        assert gauge.value is None

        gauge.set(0)
        assert gauge.value == 0

        gauge.reset()
        assert gauge.value is None


class TestLatencyTracker:
    """Tests for per-endpoint latency."""

    def test_per_endpoint(self):
        """Samples are kept apart by endpoint."""
        tracker = LatencyTracker("latency")
        for value in (0.1, 0.3):
            tracker.observe(value, "get_energy")
        tracker.observe(2.0, "submit_move")

        assert tracker.count == 3
        assert tracker.count_for("get_energy") == 2
        assert tracker.avg("get_energy") == 0.2
        assert tracker.endpoints() == ["get_energy", "submit_move"]

    def test_percentile_nearest_rank(self):
        """p95 of 1..20 is 19; p50 is 10."""
        tracker = LatencyTracker("latency")
        for value in range(20, 0, -1):
            tracker.observe(float(value), "claim")

        assert tracker.percentile(95, "claim") == 19.0
        assert tracker.percentile(50, "claim") == 10.0
        assert tracker.percentile(95, "unknown") == 0.0

    def test_window_bounds_percentiles(self):
        """Only recent samples feed percentiles; counts stay cumulative."""
        tracker = LatencyTracker("latency", window=3)
        for value in (9.0, 1.0, 1.0, 1.0):
            tracker.observe(value, "claim")

        assert tracker.count_for("claim") == 4
        assert tracker.percentile(100, "claim") == 1.0


class TestMetricsRegistry:
    """Tests for global metrics registry."""

    def test_to_dict(self):
        """Every metric is exported under its name."""
        metrics = get_metrics()
        metrics.claims_succeeded.inc(3, label="dust")
        metrics.visible_energy.set(120)
        metrics.api_latency_seconds.observe(0.25, "get_energy")

        d = metrics.to_dict()
        assert d["claims_succeeded"] == {"total": 3, "by_label": {"dust": 3}}
        assert d["visible_energy"] == 120
        assert d["api_latency_seconds"]["get_energy"]["count"] == 1
        assert d["api_timeouts"] == {"total": 0.0}

    def test_reset(self):
        """Reset clears every metric."""
        metrics = get_metrics()
        metrics.energy_refreshes.inc()
        metrics.visible_energy.set(5)
        metrics.api_latency_seconds.observe(1.0, "claim")
        reset_metrics()

        assert metrics.energy_refreshes.value == 0
        assert metrics.visible_energy.value is None
        assert metrics.api_latency_seconds.count == 0

    def test_moves_broken_down_by_move(self, fake_api, store):
        """Auto-play counts each move under its name."""
        run = RunState(entity_id="run-1", dungeon_id=1, room_number=1, player_health=20)
        fake_api.set_run(run)
        store.set_run_state(run)
        picks = iter([Move.ROCK, Move.PAPER, Move.ROCK])
        provider = CallableProvider(lambda state: next(picks, None))

        asyncio.run(create_runner(fake_api, store, provider, pace_delay=0).run_loop())

        moves = get_metrics().moves_submitted
        assert moves.by_label() == {"rock": 2, "paper": 1}
        assert get_metrics().api_latency_seconds.count_for("submit_move") == 3

    def test_claims_broken_down_by_category(self, fake_api, store):
        """Claims are counted under their category."""
        claims = create_claim_orchestrator(fake_api, store, claim_delay=0)

        asyncio.run(claims.claim_all(ClaimCategory.SHARD))

        assert get_metrics().claims_succeeded.by_label() == {"shard": 2}
