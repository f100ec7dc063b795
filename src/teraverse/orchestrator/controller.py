"""
Controller — Unified API for UI code.

Combines the run, claim and energy orchestrators, the shared store and
run history into a single coherent interface.
"""

import asyncio
from typing import Any

from teraverse.clients.base import GameAPI, call_with_timeout
from teraverse.clients.fake import FakeGameAPI
from teraverse.clients.http_client import GigaverseClient, GigaverseConfig
from teraverse.config import ControllerConfig
from teraverse.energy.scheduler import EnergyScheduler, create_energy_scheduler
from teraverse.exceptions import TeraverseError
from teraverse.history import (
    DungeonStats,
    HistoryBus,
    HistoryHandler,
    HistoryRecord,
    HistoryRecorder,
    HistoryStore,
    create_history_store,
    summarize_history,
)
from teraverse.observability import get_logger
from teraverse.orchestrator.cancellation import CancellationToken
from teraverse.orchestrator.claims import ClaimOrchestrator, create_claim_orchestrator
from teraverse.orchestrator.results import ClaimBatchResult, LoopResult, OperationResult
from teraverse.orchestrator.runner import RunOrchestrator, create_runner
from teraverse.providers import DecisionProvider, create_provider
from teraverse.schemas import ClaimableObject, EnergyState, RunState
from teraverse.state import GameStore, create_ledger, ineligibility_reason, run_slots
from teraverse.vocabulary import ClaimCategory, Move

logger = get_logger("orchestrator.controller")


# =============================================================================
# CONTROLLER
# =============================================================================

class Controller:
    """
    Surface exposed to UI code.

    Usage:
        controller = create_controller(ControllerConfig.from_env())
        await controller.refresh_all()
        await controller.start_run(dungeon_id=1)
        task = controller.enable_auto_play()
        result = await task
    """

    def __init__(
        self,
        api: GameAPI,
        config: ControllerConfig | None = None,
        store: GameStore | None = None,
        provider: DecisionProvider | None = None,
        history_store: HistoryStore | None = None,
    ):
        """
        Initialize controller.

        Args:
            api: Game API client
            config: Configuration options
            store: Pre-populated session state (optional)
            provider: Move picker (built from config.provider if not provided)
            history_store: History backend (built from config if not provided)
        """
        self.config = config or ControllerConfig()
        self.api = api
        self.store = store or GameStore(address=self.config.address)

        # Set up history
        self.history_bus = HistoryBus()
        self.history_store = (
            history_store
            if history_store is not None
            else create_history_store(self.config.history_db_path)
        )
        self.recorder = HistoryRecorder(store=self.history_store, bus=self.history_bus)

        timeout = self.config.request_timeout_seconds

        # Set up orchestrators
        self.runner: RunOrchestrator = create_runner(
            api=self.api,
            store=self.store,
            provider=provider or create_provider(self.config.provider),
            recorder=self.recorder,
            max_steps=self.config.max_steps,
            pace_delay=self.config.pace_delay_seconds,
            request_timeout=timeout,
        )
        self.claims: ClaimOrchestrator = create_claim_orchestrator(
            api=self.api,
            store=self.store,
            claim_delay=self.config.claim_delay_seconds,
            request_timeout=timeout,
        )
        self.energy_scheduler: EnergyScheduler = create_energy_scheduler(
            api=self.api,
            store=self.store,
            request_timeout=timeout,
            retry_policy=self.config.energy_retry,
            min_delay=self.config.min_timer_delay_seconds,
        )

        self._auto_play_task: asyncio.Task | None = None
        self._auto_play_cancel: CancellationToken | None = None

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @property
    def run_state(self) -> RunState | None:
        return self.store.run_state

    @property
    def energy(self) -> EnergyState | None:
        return self.store.energy

    @property
    def claimables(self) -> list[ClaimableObject]:
        return self.store.claimables

    @property
    def last_error(self) -> str | None:
        return self.store.last_error

    @property
    def provider(self) -> DecisionProvider:
        return self.runner.provider

    def set_provider(self, provider: DecisionProvider | str) -> None:
        """Switch the move picker; takes effect on the next move."""
        if isinstance(provider, str):
            provider = create_provider(provider)
        self.runner.provider = provider
        ledger = self.store.ledger
        if ledger is not None and not ledger.finalized:
            ledger.provider_name = provider.name

    @property
    def auto_play_enabled(self) -> bool:
        return (
            self._auto_play_cancel is not None
            and not self._auto_play_cancel.cancelled
            and self._auto_play_task is not None
            and not self._auto_play_task.done()
        )

    # -------------------------------------------------------------------------
    # Runs
    # -------------------------------------------------------------------------

    async def start_run(self, dungeon_id: int, juiced: bool = False) -> OperationResult:
        """
        Start a run after checking daily limits and energy.

        The eligibility check applies only once the dungeon catalog has
        been loaded.
        """
        dungeon = self.store.get_dungeon(dungeon_id)
        if dungeon is not None:
            energy = self.store.energy
            reason = ineligibility_reason(
                dungeon,
                runs_used=self.store.runs_used(dungeon_id),
                visible_energy=self.store.visible_energy,
                is_boosted=energy.is_boosted if energy else False,
                juiced=juiced,
            )
            if reason:
                logger.warning(f"Refusing to start run: {reason}")
                self.store.set_error(reason)
                return OperationResult.fail(reason)

        try:
            response = await call_with_timeout(
                self.api.start_run(dungeon_id, juiced, self.store.token.for_request()),
                self.config.request_timeout_seconds,
                "start_run",
            )
        except TeraverseError as e:
            logger.error(f"Failed to start run: {e.message}")
            self.store.set_error(e.message or "Failed to start run.")
            return OperationResult.fail(e.message)

        self.store.token.observe(response)
        self.store.set_run_state(response.run_state)

        ledger = create_ledger(
            dungeon_id=dungeon_id,
            dungeon_name=self.store.dungeon_name(dungeon_id),
            juiced=juiced,
            provider_name=self.runner.provider.name,
        )
        ledger.add_deltas(response.item_deltas)
        self.store.set_ledger(ledger)
        self.store.increment_run_count(dungeon_id, run_slots(juiced))
        self.store.clear_error()
        logger.info(f"Started run in {ledger.dungeon_name} (juiced={juiced})")

        await self.energy_scheduler.start()
        return OperationResult.ok(response.run_state)

    async def play_move(self, move: Move) -> OperationResult:
        """Submit one manual move, then check whether the run ended."""
        result = await self.runner.submit_move(move)
        if result.success:
            await self.runner.check_run_over_and_refresh()
        return result

    def enable_auto_play(self) -> "asyncio.Task[LoopResult] | None":
        """
        Start the auto-play loop in the background.

        Returns:
            The loop task, or None if a loop is already running
        """
        if self.runner.is_running or self.auto_play_enabled:
            logger.debug("Auto-play already enabled")
            return None

        cancel = CancellationToken()
        self._auto_play_cancel = cancel
        self._auto_play_task = asyncio.create_task(self.runner.run_loop(cancel))
        logger.info(f"Auto-play enabled ({self.runner.provider.name})")
        return self._auto_play_task

    def disable_auto_play(self) -> bool:
        """
        Stop auto-play at its next safe point and stop the energy timer.

        Returns:
            True if a running loop was signalled
        """
        self.energy_scheduler.stop()
        if self._auto_play_cancel is None or self._auto_play_cancel.cancelled:
            return False
        self._auto_play_cancel.cancel()
        logger.info("Auto-play disabled")
        return True

    async def wait_auto_play(self) -> LoopResult | None:
        """Wait for the current auto-play loop to return."""
        if self._auto_play_task is None:
            return None
        return await self._auto_play_task

    # -------------------------------------------------------------------------
    # Claims
    # -------------------------------------------------------------------------

    async def claim_all(self, category: ClaimCategory) -> ClaimBatchResult:
        """Drain every ROM of one category."""
        return await self.claims.claim_all(category)

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh_catalog(self) -> OperationResult:
        """Load today's dungeons and runs used per dungeon."""
        timeout = self.config.request_timeout_seconds
        try:
            dungeons = await call_with_timeout(
                self.api.get_today_dungeons(), timeout, "get_today_dungeons"
            )
            progress = await call_with_timeout(
                self.api.get_day_progress(), timeout, "get_day_progress"
            )
        except TeraverseError as e:
            logger.error(f"Failed to load dungeon catalog: {e.message}")
            self.store.set_error(f"Failed to load dungeon catalog: {e.message}")
            return OperationResult.fail(e.message)

        self.store.set_dungeons(dungeons)
        self.store.set_day_progress(progress)
        return OperationResult.ok(dungeons)

    async def refresh_all(self) -> OperationResult:
        """Refresh energy, run state, catalog and ROMs concurrently."""
        self.store.clear_error()
        results = await asyncio.gather(
            self.runner.refresh_run_state(),
            self.refresh_catalog(),
            self.claims.refresh_claimables(),
            self.energy_scheduler.start(),
        )
        run_result, catalog_result, claimables = results[0], results[1], results[2]

        errors = [r.error for r in (run_result, catalog_result) if not r.success and r.error]
        if claimables is None:
            errors.append("Failed to fetch ROMs")
        if self.store.energy is None:
            errors.append("Failed to fetch energy")

        if errors:
            message = "Failed to refresh all data."
            self.store.set_error(message)
            return OperationResult(success=False, data=errors, error=message)
        return OperationResult.ok()

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def subscribe_history(self, handler: HistoryHandler) -> int:
        """Call `handler` with every new history record."""
        return self.history_bus.subscribe(handler)

    def unsubscribe_history(self, subscription_id: int) -> bool:
        return self.history_bus.unsubscribe(subscription_id)

    def history(self, dungeon_id: int | None = None, limit: int | None = 100) -> list[HistoryRecord]:
        return self.history_store.query(dungeon_id=dungeon_id, limit=limit)

    def history_stats(self) -> list[DungeonStats]:
        return summarize_history(self.history_store.query(limit=None))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def shutdown(self) -> None:
        """Stop auto-play and the energy timer; let in-flight calls finish."""
        self.disable_auto_play()
        if self._auto_play_task is not None and not self._auto_play_task.done():
            await self._auto_play_task
        self.energy_scheduler.stop()
        logger.info("Controller shut down")

    def to_summary(self) -> dict[str, Any]:
        """Generate a summary for logging/debugging."""
        run = self.store.run_state
        energy = self.store.energy
        ledger = self.store.ledger
        return {
            "run": {
                "dungeon_id": run.dungeon_id,
                "room": run.room_number,
                "health": f"{run.player_health}/{run.player_max_health}",
            } if run else None,
            "energy": f"{energy.visible}/{energy.capacity}" if energy else None,
            "scheduler": self.energy_scheduler.state.value,
            "auto_play": self.auto_play_enabled,
            "provider": self.runner.provider.name,
            "ledger": ledger.to_summary() if ledger else None,
            "last_error": self.store.last_error,
        }


# =============================================================================
# FACTORY
# =============================================================================

def create_controller(
    config: ControllerConfig | None = None,
    api: GameAPI | None = None,
    dry_run: bool = False,
    **kwargs: Any,
) -> Controller:
    """
    Factory for controller.

    Builds the HTTP client from config unless an API is given; `dry_run`
    uses the in-memory fake server instead.
    """
    config = config or ControllerConfig()
    config.validate()

    if api is None:
        if dry_run:
            api = FakeGameAPI()
        else:
            api = GigaverseClient(GigaverseConfig(
                bearer_token=config.bearer_token,
                base_url=config.base_url,
                timeout=config.request_timeout_seconds,
                max_retries=config.http_max_retries,
                retry_delay=config.http_retry_delay,
            ))

    return Controller(api=api, config=config, **kwargs)
