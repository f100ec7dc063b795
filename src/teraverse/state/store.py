"""
Game Store — the shared state object handed to every orchestrator.

Holds the latest server snapshots (run, energy, claimables), the action
token tracker, the ledger of the current run, the dungeon catalog and
daily progress. Orchestrators receive the store at construction and go
through its accessors; nothing reaches it through module globals.

Snapshots are immutable pydantic models, so readers can keep a reference
without seeing it change under them. Each snapshot has a single writer:
the component performing the round trip that produced it.
"""

from datetime import datetime

from teraverse.schemas import ClaimableObject, DungeonInfo, EnergyState, RunState
from teraverse.state.ledger import RunLedger
from teraverse.state.token import ActionTokenTracker
from teraverse.observability import get_logger

logger = get_logger("state.store")


class GameStore:
    """
    Explicitly owned state for one player session.
    """

    def __init__(self, address: str = "", tracker: ActionTokenTracker | None = None):
        self.address = address
        self.token = tracker or ActionTokenTracker()

        self._run_state: RunState | None = None
        self._energy: EnergyState | None = None
        self._claimables: list[ClaimableObject] = []
        self._dungeons: dict[int, DungeonInfo] = {}
        self._day_progress: dict[int, int] = {}
        self._ledger: RunLedger | None = None
        self._last_error: str | None = None

        self.run_state_updated_at: datetime | None = None
        self.energy_updated_at: datetime | None = None
        self.claimables_updated_at: datetime | None = None

    # -------------------------------------------------------------------------
    # Run state
    # -------------------------------------------------------------------------

    @property
    def run_state(self) -> RunState | None:
        return self._run_state

    def set_run_state(self, state: RunState | None) -> None:
        """Replace the run snapshot; None means the server reports no run."""
        if state is None and self._run_state is not None:
            logger.info("Server reports no active run")
        self._run_state = state
        self.run_state_updated_at = datetime.now()

    @property
    def has_active_run(self) -> bool:
        return self._run_state is not None

    # -------------------------------------------------------------------------
    # Energy
    # -------------------------------------------------------------------------

    @property
    def energy(self) -> EnergyState | None:
        return self._energy

    def set_energy(self, energy: EnergyState) -> None:
        """Replace the energy snapshot wholesale."""
        self._energy = energy
        self.energy_updated_at = datetime.now()

    @property
    def visible_energy(self) -> int:
        return self._energy.visible if self._energy else 0

    # -------------------------------------------------------------------------
    # Claimables
    # -------------------------------------------------------------------------

    @property
    def claimables(self) -> list[ClaimableObject]:
        return list(self._claimables)

    def set_claimables(self, objects: list[ClaimableObject]) -> None:
        self._claimables = list(objects)
        self.claimables_updated_at = datetime.now()

    # -------------------------------------------------------------------------
    # Dungeon catalog and daily progress
    # -------------------------------------------------------------------------

    @property
    def dungeons(self) -> dict[int, DungeonInfo]:
        return dict(self._dungeons)

    def set_dungeons(self, dungeons: list[DungeonInfo]) -> None:
        self._dungeons = {d.dungeon_id: d for d in dungeons}

    def get_dungeon(self, dungeon_id: int) -> DungeonInfo | None:
        return self._dungeons.get(dungeon_id)

    def dungeon_name(self, dungeon_id: int) -> str:
        dungeon = self._dungeons.get(dungeon_id)
        return dungeon.display_name if dungeon else f"Dungeon #{dungeon_id}"

    @property
    def day_progress(self) -> dict[int, int]:
        return dict(self._day_progress)

    def set_day_progress(self, progress: dict[int, int]) -> None:
        self._day_progress = dict(progress)

    def runs_used(self, dungeon_id: int) -> int:
        return self._day_progress.get(dungeon_id, 0)

    def increment_run_count(self, dungeon_id: int, amount: int) -> None:
        self._day_progress[dungeon_id] = self.runs_used(dungeon_id) + amount

    # -------------------------------------------------------------------------
    # Run ledger
    # -------------------------------------------------------------------------

    @property
    def ledger(self) -> RunLedger | None:
        return self._ledger

    def set_ledger(self, ledger: RunLedger | None) -> None:
        self._ledger = ledger

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    @property
    def last_error(self) -> str | None:
        """Most recent error string from any operation, for display."""
        return self._last_error

    def set_error(self, message: str) -> None:
        self._last_error = message

    def clear_error(self) -> None:
        self._last_error = None

    def reset(self) -> None:
        """Drop every snapshot (logout)."""
        self.token.clear()
        self._run_state = None
        self._energy = None
        self._claimables = []
        self._day_progress = {}
        self._ledger = None
        self._last_error = None
