"""
Claim Orchestrator — drains ROM yields one claim at a time.

Claims are sent strictly in sequence with a pause between them. Energy
claims are cut off once the account's energy capacity would be reached,
since yield above capacity is lost.
"""

import asyncio

from teraverse.clients.base import GameAPI, call_with_timeout
from teraverse.exceptions import TeraverseError
from teraverse.observability import ActivityScope, get_logger, get_metrics
from teraverse.orchestrator.results import ClaimBatchResult
from teraverse.schemas import ClaimableObject, EnergyState
from teraverse.state.store import GameStore
from teraverse.vocabulary import ClaimCategory

logger = get_logger("orchestrator.claims")


def plan_claims(
    objects: list[ClaimableObject],
    category: ClaimCategory,
    current_energy: int = 0,
    capacity: int | None = None,
) -> list[ClaimableObject]:
    """
    Choose which objects to claim, in order.

    Objects with nothing to yield are dropped and the rest sorted by yield,
    largest first. For energy, a running total starts at the current
    visible energy; each object is included while the total is below
    capacity, and the first object that brings it to capacity is the last
    one claimed.

    Example:
        80/100 energy with yields [50, 30, 10] plans only the 50.
    """
    candidates = [obj for obj in objects if obj.yield_for(category) > 0]
    candidates.sort(key=lambda obj: obj.yield_for(category), reverse=True)

    if category != ClaimCategory.ENERGY or capacity is None:
        return candidates

    planned: list[ClaimableObject] = []
    total = current_energy
    for obj in candidates:
        if total >= capacity:
            break
        planned.append(obj)
        total += obj.yield_for(category)
        if total >= capacity:
            total = capacity
            break
    return planned


class ClaimOrchestrator:
    """
    Bulk claim of one category across all owned ROMs.

    Only one batch runs at a time; a second request while a batch is in
    progress is skipped.
    """

    def __init__(
        self,
        api: GameAPI,
        store: GameStore,
        claim_delay: float = 0.8,
        request_timeout: float | None = 15.0,
    ):
        self.api = api
        self.store = store
        self.claim_delay = claim_delay
        self.request_timeout = request_timeout
        self._busy = False

    @property
    def is_busy(self) -> bool:
        return self._busy

    async def claim_all(self, category: ClaimCategory) -> ClaimBatchResult:
        """
        Refresh ROMs, plan, and claim each planned ROM in turn.

        Individual claim failures are recorded and the batch continues.
        ROMs are refreshed again at the end, and energy too for an energy
        batch.
        """
        if self._busy:
            logger.info(f"Claim batch already running; skipping {category.value}")
            return ClaimBatchResult(category=category, skipped=True)

        self._busy = True
        result = ClaimBatchResult(category=category)
        try:
            with ActivityScope(activity=f"claim:{category.value}"):
                await self._run_batch(category, result)
        except Exception as e:
            logger.error(f"Claim batch for {category.value} failed: {e}", exc_info=True)
            self.store.set_error(f"Claim batch failed: {e}")
            result.errors.append(str(e))
        finally:
            self._busy = False

        logger.info(
            f"Claimed {category.value} from {len(result.claimed)}/"
            f"{len(result.planned)} ROMs ({len(result.failed)} failed)"
        )
        return result

    async def _run_batch(self, category: ClaimCategory, result: ClaimBatchResult) -> None:
        objects = await self.refresh_claimables(result)
        if objects is None:
            return

        if category == ClaimCategory.ENERGY:
            energy = self.store.energy
            if energy is None:
                energy = await self.refresh_energy(result)
            if energy is None:
                # Without a capacity reading there is no safe cutoff
                return
            planned = plan_claims(objects, category, energy.visible, energy.capacity)
        else:
            planned = plan_claims(objects, category)

        result.planned = [obj.id for obj in planned]
        if not planned:
            logger.info(f"Nothing to claim for {category.value}")
        else:
            logger.debug(f"Planned {len(planned)} {category.value} claim(s): {result.planned}")

        metrics = get_metrics()
        for obj in planned:
            await asyncio.sleep(self.claim_delay)
            try:
                ok = await call_with_timeout(
                    self.api.claim(obj.id, category),
                    self.request_timeout,
                    "claim",
                )
            except TeraverseError as e:
                ok = False
                result.errors.append(f"{obj.id}: {e.message}")
                logger.error(f"Claim of {category.value} from {obj.id} failed: {e.message}")

            if ok:
                result.claimed.append(obj.id)
                metrics.claims_succeeded.inc(label=category.value)
            else:
                result.failed.append(obj.id)
                metrics.claims_failed.inc(label=category.value)

        if result.failed:
            self.store.set_error(
                f"{len(result.failed)} {category.value} claim(s) failed"
            )

        await self.refresh_claimables(result)
        if category == ClaimCategory.ENERGY:
            await self.refresh_energy(result)

    async def refresh_claimables(
        self,
        result: ClaimBatchResult | None = None,
    ) -> list[ClaimableObject] | None:
        """Fetch owned ROMs into the store. Returns None on failure."""
        try:
            objects = await call_with_timeout(
                self.api.get_claimables(self.store.address),
                self.request_timeout,
                "get_claimables",
            )
        except TeraverseError as e:
            logger.error(f"Failed to fetch ROMs: {e.message}")
            self.store.set_error(f"Failed to fetch ROMs: {e.message}")
            if result is not None:
                result.errors.append(e.message)
            return None

        self.store.set_claimables(objects)
        return objects

    async def refresh_energy(
        self,
        result: ClaimBatchResult | None = None,
    ) -> EnergyState | None:
        """Fetch energy into the store. Returns None on failure."""
        try:
            energy = await call_with_timeout(
                self.api.get_energy(self.store.address),
                self.request_timeout,
                "get_energy",
            )
        except TeraverseError as e:
            logger.error(f"Failed to fetch energy: {e.message}")
            self.store.set_error(f"Failed to fetch energy: {e.message}")
            if result is not None:
                result.errors.append(e.message)
            return None

        self.store.set_energy(energy)
        return energy


def create_claim_orchestrator(
    api: GameAPI,
    store: GameStore,
    claim_delay: float = 0.8,
    request_timeout: float | None = 15.0,
) -> ClaimOrchestrator:
    """Factory for claim orchestrator."""
    return ClaimOrchestrator(
        api=api,
        store=store,
        claim_delay=claim_delay,
        request_timeout=request_timeout,
    )
