"""
Energy Scheduler — keeps the stored EnergyState in step with the server.

Instead of polling, the scheduler computes when the visible energy will
next tick up and fetches from the server only at that instant. Each
successful fetch replaces the stored snapshot and arms the next timer,
until energy is full or stops regenerating.

Invariants:
- At most one timer task is outstanding.
- A fetch started before `stop()` (or before a newer `start()`) never
  writes the store or arms a timer once it completes.
"""

import asyncio

from teraverse.clients.base import GameAPI, call_with_timeout
from teraverse.energy.model import DEFAULT_MIN_DELAY, delay_for_state
from teraverse.energy.retry import RetryPolicy
from teraverse.observability import ActivityScope, get_logger, get_metrics
from teraverse.state.store import GameStore
from teraverse.vocabulary import SchedulerState

logger = get_logger("energy.scheduler")


class EnergyScheduler:
    """
    Single-timer energy refresher.

    Usage:
        scheduler = EnergyScheduler(api, store)
        await scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        api: GameAPI,
        store: GameStore,
        request_timeout: float | None = 15.0,
        retry_policy: RetryPolicy | None = None,
        min_delay: float = DEFAULT_MIN_DELAY,
    ):
        self.api = api
        self.store = store
        self.request_timeout = request_timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.min_delay = min_delay

        self._state = SchedulerState.IDLE
        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None  # Fired timer still refreshing
        self._generation = 0
        self._failures = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def has_timer(self) -> bool:
        """True while a timer task is armed and has not yet fired."""
        return self._timer is not None and not self._timer.done()

    @property
    def has_inflight_refresh(self) -> bool:
        """True while a fired timer is still waiting on its fetch."""
        return self._inflight is not None and not self._inflight.done()

    @property
    def consecutive_failures(self) -> int:
        return self._failures

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """
        Fetch energy now and schedule the next refresh.

        Safe to call repeatedly: any outstanding timer is cancelled and
        results of earlier in-flight fetches are discarded.
        """
        self._cancel_timer()
        self._generation += 1
        self._failures = 0
        await self._refresh(self._generation)

    def stop(self) -> None:
        """Cancel any timer and go idle. Idempotent."""
        self._cancel_timer()
        self._generation += 1
        self._failures = 0
        if self._state != SchedulerState.IDLE:
            logger.debug("Energy scheduler stopped")
        self._state = SchedulerState.IDLE

    def reschedule(self) -> None:
        """
        Arm the timer for the next boundary of the stored snapshot.

        Goes IDLE when energy is full, not regenerating, or unknown.
        Must be called from inside a running event loop.
        """
        self._cancel_timer()
        energy = self.store.energy
        delay = delay_for_state(energy, min_delay=self.min_delay)

        if delay is None:
            if energy is not None and not energy.is_full and energy.regen_per_second > 0:
                # Boundary already reached; refresh as soon as allowed
                self._arm(self.min_delay, self._generation)
                return
            self._state = SchedulerState.IDLE
            logger.debug("Energy full or not regenerating; scheduler idle")
            return

        self._arm(delay, self._generation)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _arm(self, delay: float, generation: int) -> None:
        self._cancel_timer()
        self._timer = asyncio.create_task(self._fire(delay, generation))
        self._state = SchedulerState.SCHEDULED
        logger.debug(f"Next energy refresh in {delay:.2f}s")

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire(self, delay: float, generation: int) -> None:
        await asyncio.sleep(delay)
        if generation != self._generation:
            return
        # This task has fired; the refresh arms a fresh one if needed
        task = asyncio.current_task()
        self._inflight = task
        self._timer = None
        try:
            await self._refresh(generation)
        finally:
            if self._inflight is task:
                self._inflight = None

    async def _refresh(self, generation: int) -> None:
        with ActivityScope(activity="energy"):
            await self._fetch(generation)

    async def _fetch(self, generation: int) -> None:
        self._state = SchedulerState.REFRESHING
        metrics = get_metrics()
        metrics.energy_refreshes.inc()

        try:
            energy = await call_with_timeout(
                self.api.get_energy(self.store.address),
                self.request_timeout,
                "get_energy",
            )
        except Exception as exc:
            if generation != self._generation:
                return
            self._on_failure(exc, generation)
            return

        if generation != self._generation:
            logger.debug("Discarding energy fetch from a stopped schedule")
            return

        self._failures = 0
        self.store.set_energy(energy)
        metrics.visible_energy.set(energy.visible)
        logger.debug(f"Energy {energy.visible}/{energy.capacity}")
        self.reschedule()

    def _on_failure(self, exc: Exception, generation: int) -> None:
        self._failures += 1
        get_metrics().energy_refresh_failures.inc()

        if self.retry_policy.should_retry(self._failures):
            delay = self.retry_policy.delay_for(self._failures)
            logger.warning(
                f"Energy refresh failed ({self._failures}/"
                f"{self.retry_policy.max_attempts}): {exc}; retrying in {delay:.1f}s"
            )
            self._arm(delay, generation)
            return

        logger.error(
            f"Energy refresh failed after {self._failures} attempts: {exc}",
            exc_info=True,
        )
        self.store.set_error(f"Energy refresh failed: {exc}")
        self._failures = 0
        self._state = SchedulerState.IDLE


def create_energy_scheduler(
    api: GameAPI,
    store: GameStore,
    request_timeout: float | None = 15.0,
    retry_policy: RetryPolicy | None = None,
    min_delay: float = DEFAULT_MIN_DELAY,
) -> EnergyScheduler:
    """Factory for energy scheduler."""
    return EnergyScheduler(
        api=api,
        store=store,
        request_timeout=request_timeout,
        retry_policy=retry_policy,
        min_delay=min_delay,
    )
