"""
Metrics — in-process counters for the controller.

Moves are broken down by move, claims by category and API latency by
endpoint, so a summary can show where a session spent its requests.
"""

import math
from collections import deque
from dataclasses import dataclass, field, fields
from threading import Lock
from typing import Any

# Recent samples kept per endpoint for percentiles
LATENCY_WINDOW = 200


class Counter:
    """Monotonic counter with an optional per-label breakdown."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._total = 0.0
        self._by_label: dict[str, float] = {}
        self._lock = Lock()

    def inc(self, amount: float = 1.0, label: str | None = None) -> None:
        with self._lock:
            self._total += amount
            if label is not None:
                self._by_label[label] = self._by_label.get(label, 0.0) + amount

    @property
    def value(self) -> float:
        return self._total

    def get(self, label: str) -> float:
        return self._by_label.get(label, 0.0)

    def by_label(self) -> dict[str, float]:
        with self._lock:
            return dict(self._by_label)

    def reset(self) -> None:
        with self._lock:
            self._total = 0.0
            self._by_label.clear()

    def export(self) -> dict[str, Any]:
        data: dict[str, Any] = {"total": self._total}
        if self._by_label:
            data["by_label"] = self.by_label()
        return data


class Gauge:
    """Last observed value; None until first set."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value: float | None = None
        self._lock = Lock()

    def set(self, value: float) -> None:
        with self._lock:
            self._value = value

    @property
    def value(self) -> float | None:
        return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = None

    def export(self) -> float | None:
        return self._value


class LatencyTracker:
    """
    Call latency per endpoint.

    Keeps a running count and total for every endpoint, plus a window of
    recent samples for percentiles. Percentiles use nearest rank over the
    window.
    """

    def __init__(self, name: str, description: str = "", window: int = LATENCY_WINDOW):
        self.name = name
        self.description = description
        self.window = window
        self._counts: dict[str, int] = {}
        self._totals: dict[str, float] = {}
        self._samples: dict[str, deque[float]] = {}
        self._lock = Lock()

    def observe(self, seconds: float, endpoint: str = "unknown") -> None:
        with self._lock:
            self._counts[endpoint] = self._counts.get(endpoint, 0) + 1
            self._totals[endpoint] = self._totals.get(endpoint, 0.0) + seconds
            samples = self._samples.setdefault(endpoint, deque(maxlen=self.window))
            samples.append(seconds)

    @property
    def count(self) -> int:
        return sum(self._counts.values())

    def count_for(self, endpoint: str) -> int:
        return self._counts.get(endpoint, 0)

    def endpoints(self) -> list[str]:
        return sorted(self._counts)

    def avg(self, endpoint: str) -> float:
        count = self._counts.get(endpoint, 0)
        return self._totals[endpoint] / count if count else 0.0

    def percentile(self, q: float, endpoint: str) -> float:
        """Nearest-rank percentile (0 < q <= 100) of recent samples."""
        with self._lock:
            samples = sorted(self._samples.get(endpoint, ()))
        if not samples:
            return 0.0
        rank = max(1, math.ceil(len(samples) * q / 100))
        return samples[rank - 1]

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._totals.clear()
            self._samples.clear()

    def export(self) -> dict[str, dict[str, float]]:
        return {
            endpoint: {
                "count": self._counts[endpoint],
                "avg": self.avg(endpoint),
                "p95": self.percentile(95, endpoint),
            }
            for endpoint in self.endpoints()
        }


@dataclass
class MetricsRegistry:
    """
    Registry for all controller metrics.
    """
    # Runs
    moves_submitted: Counter = field(
        default_factory=lambda: Counter("moves_submitted", "Moves accepted, by move")
    )
    moves_failed: Counter = field(
        default_factory=lambda: Counter("moves_failed", "Move submissions that failed, by move")
    )
    runs_completed: Counter = field(
        default_factory=lambda: Counter("runs_completed", "Runs that reached a terminal state")
    )
    history_records: Counter = field(
        default_factory=lambda: Counter("history_records", "History records written")
    )

    # Claims
    claims_succeeded: Counter = field(
        default_factory=lambda: Counter("claims_succeeded", "Successful ROM claims, by category")
    )
    claims_failed: Counter = field(
        default_factory=lambda: Counter("claims_failed", "Failed ROM claims, by category")
    )

    # Energy
    energy_refreshes: Counter = field(
        default_factory=lambda: Counter("energy_refreshes", "Energy fetches")
    )
    energy_refresh_failures: Counter = field(
        default_factory=lambda: Counter("energy_refresh_failures", "Failed energy fetches")
    )
    visible_energy: Gauge = field(
        default_factory=lambda: Gauge("visible_energy", "Last observed visible energy")
    )

    # Transport
    api_latency_seconds: LatencyTracker = field(
        default_factory=lambda: LatencyTracker("api_latency_seconds", "Game API call latency")
    )
    api_timeouts: Counter = field(
        default_factory=lambda: Counter("api_timeouts", "Calls that hit the timeout, by endpoint")
    )

    def to_dict(self) -> dict[str, Any]:
        """Export every metric under its name."""
        return {f.name: getattr(self, f.name).export() for f in fields(self)}

    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        for f in fields(self):
            getattr(self, f.name).reset()


# Global metrics registry
_metrics = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get global metrics registry."""
    return _metrics


def reset_metrics() -> None:
    """Reset all metrics (for testing)."""
    _metrics.reset()
