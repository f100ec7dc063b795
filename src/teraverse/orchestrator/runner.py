"""
Run Orchestrator — drives a dungeon run move by move.

Coordinates the decision provider, move submission, token and run state
updates, and history recording when the run ends.
"""

import asyncio

from teraverse.clients.base import GameAPI, call_with_timeout
from teraverse.exceptions import TeraverseError
from teraverse.history.recorder import HistoryRecorder
from teraverse.history.record import HistoryRecord
from teraverse.observability import ActivityScope, get_logger, get_metrics
from teraverse.orchestrator.cancellation import CancellationToken
from teraverse.orchestrator.results import LoopResult, OperationResult
from teraverse.providers.base import DecisionProvider
from teraverse.providers.builtin import ManualProvider
from teraverse.schemas import RunState
from teraverse.state.ledger import RunLedger, create_ledger
from teraverse.state.store import GameStore
from teraverse.vocabulary import LoopExitReason, LoopState, Move

logger = get_logger("orchestrator.runner")


# =============================================================================
# RUN ORCHESTRATOR
# =============================================================================

class RunOrchestrator:
    """
    Auto-play loop and move submission for the active run.

    Handles:
    - Termination detection and history recording
    - Move selection through the decision provider
    - Submission with the current action token
    - Cooperative cancellation and the step cap
    """

    def __init__(
        self,
        api: GameAPI,
        store: GameStore,
        provider: DecisionProvider | None = None,
        recorder: HistoryRecorder | None = None,
        max_steps: int = 60,  # Safety limit
        pace_delay: float = 0.05,
        request_timeout: float | None = 15.0,
    ):
        """
        Initialize runner.

        Args:
            api: Game API client
            store: Shared session state
            provider: Move picker (manual if not provided)
            recorder: Writes history when a run ends (optional)
            max_steps: Maximum moves per loop invocation
            pace_delay: Pause between moves in seconds
            request_timeout: Per-call timeout in seconds
        """
        self.api = api
        self.store = store
        self.provider = provider or ManualProvider()
        self.recorder = recorder
        self.max_steps = max_steps
        self.pace_delay = pace_delay
        self.request_timeout = request_timeout

        self._state = LoopState.STOPPED
        self._cancel: CancellationToken | None = None
        self._submit_lock = asyncio.Lock()

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == LoopState.RUNNING

    # -------------------------------------------------------------------------
    # Auto-play loop
    # -------------------------------------------------------------------------

    async def run_loop(self, cancel: CancellationToken | None = None) -> LoopResult:
        """
        Play moves until the run ends, the provider stops, the loop is
        cancelled or the step cap is reached.

        A call made while a loop is already running returns immediately
        with `ALREADY_RUNNING`.
        """
        if self._state == LoopState.RUNNING:
            logger.debug("Auto-play loop already running; ignoring")
            return LoopResult(exit_reason=LoopExitReason.ALREADY_RUNNING)

        self._state = LoopState.RUNNING
        self._cancel = cancel or CancellationToken()
        result = LoopResult(exit_reason=LoopExitReason.STEP_LIMIT)
        run_state = self.store.run_state

        with ActivityScope(
            activity="autoplay",
            run_id=run_state.entity_id if run_state else None,
            dungeon_id=run_state.dungeon_id if run_state else None,
            provider=self.provider.name,
        ):
            try:
                await self._loop(self._cancel, result)

                # One final check whatever the exit reason
                if result.exit_reason != LoopExitReason.RUN_ENDED:
                    if await self._check_terminal(result):
                        logger.info("Run ended after loop exit")
            except Exception as e:
                logger.error(f"Auto-play loop failed: {e}", exc_info=True)
                self.store.set_error(f"Auto-play failed: {e}")
                result.exit_reason = LoopExitReason.ERROR
                result.errors.append(str(e))
            finally:
                self._state = LoopState.STOPPED
                self._cancel = None

        logger.info(
            f"Auto-play stopped ({result.exit_reason.value}): "
            f"{result.moves_submitted} moves, {result.moves_failed} failed"
        )
        return result

    async def _loop(self, cancel: CancellationToken, result: LoopResult) -> None:
        steps_remaining = self.max_steps

        while steps_remaining > 0:
            if cancel.cancelled:
                result.exit_reason = LoopExitReason.CANCELLED
                return

            if await self._check_terminal(result):
                result.exit_reason = LoopExitReason.RUN_ENDED
                return

            move = self._pick_move(self.store.run_state)
            if move is None:
                result.exit_reason = LoopExitReason.NO_MOVE
                return

            outcome = await self.submit_move(move)
            result.steps_taken += 1
            if outcome.success:
                result.moves_submitted += 1
            else:
                result.moves_failed += 1
                result.errors.append(outcome.error or "Move failed")

            if await cancel.wait(self.pace_delay):
                result.exit_reason = LoopExitReason.CANCELLED
                return

            steps_remaining -= 1

        logger.warning(f"Auto-play reached the step limit ({self.max_steps})")

    def _pick_move(self, run_state: RunState | None) -> Move | None:
        """Ask the provider; any provider failure means no move."""
        if run_state is None:
            return None
        try:
            return self.provider.pick_action(run_state)
        except Exception as e:
            logger.warning(f"Provider '{self.provider.name}' failed: {e}", exc_info=True)
            return None

    def _disable_auto_play(self) -> None:
        if self._cancel is not None and not self._cancel.cancelled:
            logger.info("Disabling auto-play")
            self._cancel.cancel()

    # -------------------------------------------------------------------------
    # Termination
    # -------------------------------------------------------------------------

    async def check_run_over_and_refresh(self) -> bool:
        """
        Check the stored snapshot for the end of the run.

        No run, zero health or the completion flag all end auto-play and
        trigger a refresh from the server. A run that ended with a snapshot
        also gets exactly one history record.

        Returns:
            True if the run is over
        """
        return await self._check_terminal(None)

    async def _check_terminal(self, result: LoopResult | None) -> bool:
        run_state = self.store.run_state

        if run_state is None:
            self._disable_auto_play()
            await self.refresh_run_state()
            return True

        if run_state.is_over:
            self._disable_auto_play()
            record = self._record(run_state)
            if result is not None and record is not None:
                result.history_record = record
            await self.refresh_run_state()
            return True

        return False

    def _record(self, run_state: RunState) -> HistoryRecord | None:
        ledger = self.ensure_ledger(run_state)
        if ledger.finalized:
            return None

        get_metrics().runs_completed.inc()
        if self.recorder is None:
            ledger.finalize()
            return None

        try:
            return self.recorder.record_run(ledger, run_state)
        except Exception as e:
            logger.error(f"Failed to record run history: {e}", exc_info=True)
            self.store.set_error(f"Failed to record run history: {e}")
            return None

    async def refresh_run_state(self) -> OperationResult:
        """Fetch the run from the server and replace the stored snapshot."""
        try:
            run_state = await call_with_timeout(
                self.api.fetch_run_state(),
                self.request_timeout,
                "fetch_run_state",
            )
        except TeraverseError as e:
            logger.error(f"Failed to refresh run state: {e.message}")
            self.store.set_error(f"Failed to refresh run state: {e.message}")
            return OperationResult.fail(e.message)

        self.store.set_run_state(run_state)
        return OperationResult.ok(run_state)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def ensure_ledger(self, run_state: RunState) -> RunLedger:
        """
        Ledger for this run, creating one if the run was not started here.
        """
        ledger = self.store.ledger
        stale = (
            ledger is None
            or ledger.dungeon_id != run_state.dungeon_id
            or (ledger.finalized and not run_state.is_over)
        )
        if stale:
            ledger = create_ledger(
                dungeon_id=run_state.dungeon_id,
                dungeon_name=self.store.dungeon_name(run_state.dungeon_id),
                provider_name=self.provider.name,
            )
            self.store.set_ledger(ledger)
        return ledger

    async def submit_move(self, move: Move) -> OperationResult:
        """
        Submit one move for the active run.

        Used by both the loop and manual play. A failure is logged and
        stored as the last error; the move is not retried.
        """
        async with self._submit_lock:
            run_state = self.store.run_state
            if run_state is None:
                return OperationResult.fail("No active run")

            ledger = self.ensure_ledger(run_state)
            metrics = get_metrics()

            try:
                response = await call_with_timeout(
                    self.api.submit_move(
                        move,
                        run_state.dungeon_id,
                        self.store.token.for_request(),
                    ),
                    self.request_timeout,
                    "submit_move",
                )
            except TeraverseError as e:
                logger.error(f"Move '{move.value}' failed: {e.message}")
                self.store.set_error(f"Move failed: {e.message}")
                ledger.record_move(False)
                metrics.moves_failed.inc(label=move.value)
                return OperationResult.fail(e.message)

            self.store.token.observe(response)
            self.store.set_run_state(response.run_state)
            ledger.add_deltas(response.item_deltas)
            ledger.record_move(True)
            metrics.moves_submitted.inc(label=move.value)

            logger.debug(f"Played {move.value}")
            return OperationResult.ok(response.run_state)


# =============================================================================
# FACTORY
# =============================================================================

def create_runner(
    api: GameAPI,
    store: GameStore,
    provider: DecisionProvider | None = None,
    recorder: HistoryRecorder | None = None,
    max_steps: int = 60,
    pace_delay: float = 0.05,
    request_timeout: float | None = 15.0,
) -> RunOrchestrator:
    """Factory for run orchestrator."""
    return RunOrchestrator(
        api=api,
        store=store,
        provider=provider,
        recorder=recorder,
        max_steps=max_steps,
        pace_delay=pace_delay,
        request_timeout=request_timeout,
    )
