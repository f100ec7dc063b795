"""
Game API protocol — the contract the orchestrators consume.

Allows swapping implementations (HTTP client, in-memory fake, recorders).
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Protocol, TypeVar, runtime_checkable

from teraverse.exceptions import APITimeoutError
from teraverse.observability import get_metrics
from teraverse.schemas import (
    ClaimableObject,
    DungeonInfo,
    EnergyState,
    ItemDelta,
    RunState,
)
from teraverse.state.token import ActionToken
from teraverse.vocabulary import ClaimCategory, Move

T = TypeVar("T")


@dataclass
class ActionResponse:
    """
    Result of a mutating dungeon call (start run or move).

    `run_state` is None when the server reports no active run.
    """
    run_state: RunState | None
    action_token: ActionToken | None = None
    item_deltas: list[ItemDelta] = field(default_factory=list)
    message: str | None = None


@runtime_checkable
class GameAPI(Protocol):
    """
    Protocol for game API clients.

    Every method may raise `APIError`; the orchestrators decide how a
    failure is surfaced.
    """

    async def start_run(
        self,
        dungeon_id: int,
        juiced: bool,
        action_token: ActionToken,
    ) -> ActionResponse:
        """Start a run in a dungeon."""
        ...

    async def submit_move(
        self,
        move: Move,
        dungeon_id: int,
        action_token: ActionToken,
    ) -> ActionResponse:
        """Submit one move or loot pick."""
        ...

    async def fetch_run_state(self) -> RunState | None:
        """Read the current run without mutating it."""
        ...

    async def get_energy(self, address: str) -> EnergyState:
        """Read the player's energy."""
        ...

    async def get_claimables(self, address: str) -> list[ClaimableObject]:
        """List owned ROMs and their pending yield."""
        ...

    async def claim(self, object_id: str, category: ClaimCategory) -> bool:
        """Drain one ROM's yield in one category."""
        ...

    async def get_today_dungeons(self) -> list[DungeonInfo]:
        """Today's dungeon catalog."""
        ...

    async def get_day_progress(self) -> dict[int, int]:
        """Runs used today, per dungeon id."""
        ...


async def call_with_timeout(
    call: Awaitable[T],
    timeout: float | None,
    endpoint: str,
) -> T:
    """
    Await an API call under a per-call timeout.

    Expiry is raised as APITimeoutError so callers treat it like any other
    API failure. Latency is recorded either way.
    """
    started = time.monotonic()
    try:
        if timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError:
        get_metrics().api_timeouts.inc(label=endpoint)
        raise APITimeoutError(endpoint, timeout or 0.0) from None
    finally:
        get_metrics().api_latency_seconds.observe(time.monotonic() - started, endpoint)


def parse_item_deltas(raw: list[dict[str, Any]] | None) -> list[ItemDelta]:
    """Parse `gameItemBalanceChanges` entries."""
    return [ItemDelta.from_api(entry) for entry in raw or []]
