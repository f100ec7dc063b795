"""
History Recorder — turns a finished run's ledger into a stored record.
"""

from teraverse.history.bus import HistoryBus
from teraverse.history.record import HistoryRecord
from teraverse.history.store import HistoryStore, InMemoryHistoryStore
from teraverse.observability import get_logger, get_metrics
from teraverse.schemas import RunState
from teraverse.state.ledger import RunLedger

logger = get_logger("history.recorder")


class HistoryRecorder:
    """
    Persists and publishes one record per finished run.

    The ledger's `finalized` flag guarantees a second call for the same
    run is a no-op.
    """

    def __init__(
        self,
        store: HistoryStore | None = None,
        bus: HistoryBus | None = None,
    ):
        self.store = store if store is not None else InMemoryHistoryStore()
        self.bus = bus or HistoryBus()

    def record_run(self, ledger: RunLedger, run_state: RunState) -> HistoryRecord | None:
        """
        Write the record for a run that has just ended.

        Returns:
            The new record, or None if this run was already recorded
        """
        if ledger.finalized:
            logger.debug(f"Run in dungeon {ledger.dungeon_id} already recorded")
            return None

        record = HistoryRecord(
            dungeon_id=ledger.dungeon_id,
            dungeon_name=ledger.dungeon_name,
            juiced=ledger.juiced,
            enemies_defeated=run_state.enemies_defeated,
            item_changes=ledger.aggregated_changes(),
            provider_name=ledger.provider_name,
        )
        ledger.finalize()

        self.store.save(record)
        get_metrics().history_records.inc()
        logger.info(
            f"Recorded run in {record.display_name}: "
            f"{record.enemies_defeated} enemies defeated ({record.provider_name})"
        )

        self.bus.publish(record)
        return record
