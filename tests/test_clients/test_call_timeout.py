"""Tests for per-call timeouts."""

import asyncio

import pytest

from teraverse.clients import call_with_timeout, parse_item_deltas
from teraverse.exceptions import APIError, APITimeoutError
from teraverse.observability import get_metrics


async def slow(value, delay):
    await asyncio.sleep(delay)
    return value


class TestCallWithTimeout:
    """Tests for call_with_timeout."""

    def test_returns_value(self):
        """Fast calls return their value and record latency."""
        assert asyncio.run(call_with_timeout(slow(3, 0), 1.0, "get_energy")) == 3
        assert get_metrics().api_latency_seconds.count_for("get_energy") == 1
        assert get_metrics().api_timeouts.value == 0

    def test_no_timeout(self):
        """None disables the timeout."""
        assert asyncio.run(call_with_timeout(slow("x", 0.01), None, "claim")) == "x"

    def test_timeout_raises_api_error(self):
        """Expiry surfaces as an APITimeoutError."""
        with pytest.raises(APITimeoutError) as exc_info:
            asyncio.run(call_with_timeout(slow(1, 1.0), 0.01, "submit_move"))

        error = exc_info.value
        assert isinstance(error, APIError)
        assert error.endpoint == "submit_move"
        assert "submit_move timed out after 0.0s" == error.message
        assert get_metrics().api_latency_seconds.count == 1
        assert get_metrics().api_timeouts.get("submit_move") == 1


class TestParseItemDeltas:
    """Tests for parse_item_deltas."""

    def test_parses_entries(self):
        """Balance change entries become item deltas."""
        deltas = parse_item_deltas([{"id": "4", "amount": -2}])
        assert deltas[0].item_id == 4
        assert deltas[0].amount == -2

    def test_missing(self):
        """Missing lists parse to nothing."""
        assert parse_item_deltas(None) == []
