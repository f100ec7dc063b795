"""
Vocabulary — shared enumerations.
"""

from teraverse.vocabulary.enums import (
    Move,
    COMBAT_MOVES,
    LOOT_MOVES,
    ClaimCategory,
    SchedulerState,
    LoopState,
    LoopExitReason,
    ProviderKind,
)

__all__ = [
    "Move",
    "COMBAT_MOVES",
    "LOOT_MOVES",
    "ClaimCategory",
    "SchedulerState",
    "LoopState",
    "LoopExitReason",
    "ProviderKind",
]
