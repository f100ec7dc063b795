"""
Fake Game API — in-memory server for tests and dry runs.

Keeps a single run, an energy counter, a set of ROMs and a dungeon
catalog. Move outcomes are scripted; failures and latency can be injected
per method. Every call is appended to `calls` for inspection.
"""

import asyncio
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any

from teraverse.clients.base import ActionResponse
from teraverse.exceptions import APIError
from teraverse.schemas import (
    ClaimableObject,
    DungeonInfo,
    EnergyState,
    ItemDelta,
    RunState,
    to_raw,
)
from teraverse.state.token import ActionToken
from teraverse.vocabulary import ClaimCategory, Move


@dataclass
class MoveOutcome:
    """
    Scripted effect of one move.

    Defaults advance one room without damage.
    """
    room_delta: int = 1
    health_delta: int = 0
    complete: bool = False
    loot_options: int = 0
    deltas: list[ItemDelta] = field(default_factory=list)
    end_run: bool = False  # Server drops the run entirely


@dataclass
class FakeCall:
    """Record of one API call."""
    method: str
    args: tuple[Any, ...] = ()


class FakeGameAPI:
    """
    In-memory GameAPI implementation.

    Usage:
        api = FakeGameAPI(energy=EnergyState(...))
        api.script_moves([MoveOutcome(), MoveOutcome(health_delta=-100)])
    """

    def __init__(
        self,
        energy: EnergyState | None = None,
        claimables: list[ClaimableObject] | None = None,
        dungeons: list[DungeonInfo] | None = None,
        starting_health: int = 20,
        strict_tokens: bool = True,
    ):
        self.energy = energy or EnergyState(raw_value=to_raw(100), capacity=240)
        self.roms: dict[str, ClaimableObject] = {c.id: c for c in claimables or []}
        self.dungeons = list(dungeons or [])
        self.day_progress: dict[int, int] = {}
        self.starting_health = starting_health
        self.strict_tokens = strict_tokens

        self.run: RunState | None = None
        self.calls: list[FakeCall] = []
        self.energy_script: deque[EnergyState] = deque()
        self.claim_rejections: set[str] = set()

        self._token_counter = 0
        self._token: ActionToken = ""
        self._moves: deque[MoveOutcome] = deque()
        self._failures: dict[str, deque[Exception]] = defaultdict(deque)
        self._delays: dict[str, float] = {}

    # -------------------------------------------------------------------------
    # Test controls
    # -------------------------------------------------------------------------

    def script_moves(self, outcomes: list[MoveOutcome]) -> None:
        """Queue outcomes for upcoming moves."""
        self._moves.extend(outcomes)

    def fail_next(self, method: str, times: int = 1, error: Exception | None = None) -> None:
        """Make the next `times` calls to `method` raise."""
        for _ in range(times):
            self._failures[method].append(
                error or APIError(f"Injected failure in {method}", status_code=503)
            )

    def set_delay(self, method: str, seconds: float) -> None:
        """Add latency to every call of `method`."""
        self._delays[method] = seconds

    def set_run(self, state: RunState | None) -> None:
        self.run = state

    def calls_to(self, method: str) -> list[FakeCall]:
        return [c for c in self.calls if c.method == method]

    @property
    def current_token(self) -> ActionToken:
        return self._token

    async def _enter(self, method: str, *args: Any) -> None:
        self.calls.append(FakeCall(method, args))
        delay = self._delays.get(method)
        if delay:
            await asyncio.sleep(delay)
        if self._failures[method]:
            raise self._failures[method].popleft()

    def _issue_token(self) -> ActionToken:
        self._token_counter += 1
        self._token = f"tok-{self._token_counter}"
        return self._token

    def _check_token(self, action_token: ActionToken) -> None:
        if self.strict_tokens and self._token and action_token != self._token:
            raise APIError(
                f"Stale action token {action_token!r}",
                status_code=409,
            )

    # -------------------------------------------------------------------------
    # GameAPI
    # -------------------------------------------------------------------------

    async def start_run(
        self,
        dungeon_id: int,
        juiced: bool,
        action_token: ActionToken,
    ) -> ActionResponse:
        await self._enter("start_run", dungeon_id, juiced, action_token)
        self._check_token(action_token)
        if self.run is not None:
            raise APIError("A run is already active", status_code=400)

        dungeon = next((d for d in self.dungeons if d.dungeon_id == dungeon_id), None)
        if dungeon is not None:
            cost = dungeon.juiced_energy_cost if juiced else dungeon.energy_cost
            self.energy = self.energy.model_copy(
                update={"raw_value": max(0, self.energy.raw_value - to_raw(cost))}
            )
        self.day_progress[dungeon_id] = self.day_progress.get(dungeon_id, 0) + (3 if juiced else 1)

        self.run = RunState(
            entity_id=f"run-{self._token_counter + 1}",
            dungeon_id=dungeon_id,
            room_number=1,
            player_health=self.starting_health,
            player_max_health=self.starting_health,
        )
        return ActionResponse(run_state=self.run, action_token=self._issue_token())

    async def submit_move(
        self,
        move: Move,
        dungeon_id: int,
        action_token: ActionToken,
    ) -> ActionResponse:
        await self._enter("submit_move", move, dungeon_id, action_token)
        self._check_token(action_token)
        if self.run is None:
            raise APIError("No active run", status_code=400)

        outcome = self._moves.popleft() if self._moves else MoveOutcome()
        if outcome.end_run:
            self.run = None
            return ActionResponse(
                run_state=None,
                action_token=self._issue_token(),
                item_deltas=list(outcome.deltas),
            )

        self.run = self.run.model_copy(update={
            "room_number": self.run.room_number + outcome.room_delta,
            "player_health": max(0, self.run.player_health + outcome.health_delta),
            "completion_flag": outcome.complete,
            "loot_phase": outcome.loot_options > 0,
            "loot_option_count": outcome.loot_options,
        })
        return ActionResponse(
            run_state=self.run,
            action_token=self._issue_token(),
            item_deltas=list(outcome.deltas),
        )

    async def fetch_run_state(self) -> RunState | None:
        await self._enter("fetch_run_state")
        return self.run

    async def get_energy(self, address: str) -> EnergyState:
        await self._enter("get_energy", address)
        if self.energy_script:
            self.energy = self.energy_script.popleft()
        return self.energy

    async def get_claimables(self, address: str) -> list[ClaimableObject]:
        await self._enter("get_claimables", address)
        return list(self.roms.values())

    async def claim(self, object_id: str, category: ClaimCategory) -> bool:
        await self._enter("claim", object_id, category)
        rom = self.roms.get(object_id)
        if rom is None:
            raise APIError(f"Unknown ROM {object_id}", status_code=404)
        if object_id in self.claim_rejections:
            return False

        amount = rom.yield_for(category)
        if category == ClaimCategory.ENERGY:
            raw = min(self.energy.capacity_raw, self.energy.raw_value + to_raw(amount))
            self.energy = self.energy.model_copy(update={"raw_value": raw})
        self.roms[object_id] = rom.model_copy(update={f"{category.value}_yield": 0})
        return True

    async def get_today_dungeons(self) -> list[DungeonInfo]:
        await self._enter("get_today_dungeons")
        return list(self.dungeons)

    async def get_day_progress(self) -> dict[int, int]:
        await self._enter("get_day_progress")
        return dict(self.day_progress)
