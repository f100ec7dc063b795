"""
Vocabulary enums — the shared language of the controller.

Moves, claim categories and component states referenced by the schemas,
orchestrators and decision providers.
"""

from enum import Enum


# =============================================================================
# MOVES
# =============================================================================

class Move(str, Enum):
    """
    Actions accepted by the dungeon action endpoint.

    Combat moves are submitted outside the loot phase; loot picks select
    one of the offered loot options by position.
    """
    ROCK = "rock"
    PAPER = "paper"
    SCISSOR = "scissor"
    PICK_LOOT_ONE = "loot_one"
    PICK_LOOT_TWO = "loot_two"
    PICK_LOOT_THREE = "loot_three"
    PICK_LOOT_FOUR = "loot_four"

    @property
    def is_loot_pick(self) -> bool:
        return self in LOOT_MOVES


COMBAT_MOVES: tuple[Move, ...] = (Move.ROCK, Move.PAPER, Move.SCISSOR)

LOOT_MOVES: tuple[Move, ...] = (
    Move.PICK_LOOT_ONE,
    Move.PICK_LOOT_TWO,
    Move.PICK_LOOT_THREE,
    Move.PICK_LOOT_FOUR,
)


# =============================================================================
# CLAIMS
# =============================================================================

class ClaimCategory(str, Enum):
    """
    Resource categories a ROM accumulates.

    Only ENERGY has an account-wide capacity to respect.
    """
    DUST = "dust"
    SHARD = "shard"
    ENERGY = "energy"


# =============================================================================
# COMPONENT STATES
# =============================================================================

class SchedulerState(str, Enum):
    """Energy scheduler lifecycle."""
    IDLE = "IDLE"
    SCHEDULED = "SCHEDULED"
    REFRESHING = "REFRESHING"


class LoopState(str, Enum):
    """Auto-play loop lifecycle."""
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


class LoopExitReason(str, Enum):
    """Why an auto-play loop returned."""
    RUN_ENDED = "RUN_ENDED"            # Health, completion flag or no run
    NO_MOVE = "NO_MOVE"                # Provider had nothing to propose
    CANCELLED = "CANCELLED"            # Auto-play disabled
    STEP_LIMIT = "STEP_LIMIT"          # Safety cap reached
    ALREADY_RUNNING = "ALREADY_RUNNING"  # Re-entrant call ignored
    ERROR = "ERROR"                    # Unexpected failure inside the loop


class ProviderKind(str, Enum):
    """Decision providers selectable by configuration."""
    MANUAL = "manual"
    RANDOM = "random"
    CALLABLE = "callable"
