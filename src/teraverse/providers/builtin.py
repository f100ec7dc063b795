"""
Built-in Providers — simple move pickers.

Search-based engines live outside this package and plug in through
CallableProvider.
"""

import random
from typing import Callable

from teraverse.providers.base import BaseProvider
from teraverse.schemas import RunState
from teraverse.vocabulary import COMBAT_MOVES, LOOT_MOVES, Move


class ManualProvider(BaseProvider):
    """
    Never proposes a move; the player submits moves by hand.
    """

    @property
    def name(self) -> str:
        return "manual"

    def pick_action(self, run_state: RunState) -> Move | None:
        return None


class RandomProvider(BaseProvider):
    """
    Uniform random choice.

    Picks among the offered loot options during the loot phase (at most
    four), otherwise among the three combat moves.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng or random.Random(seed)

    @property
    def name(self) -> str:
        return "random"

    def pick_action(self, run_state: RunState) -> Move | None:
        if run_state.is_over:
            return None
        if run_state.in_loot_phase:
            options = LOOT_MOVES[:min(run_state.loot_option_count, len(LOOT_MOVES))]
            return self._rng.choice(options)
        return self._rng.choice(COMBAT_MOVES)


class CallableProvider(BaseProvider):
    """
    Adapts an external engine function.

    The callable receives the run snapshot and may return a Move, a move
    string such as "rock" or "loot_two", or None.
    """

    def __init__(self, func: Callable[[RunState], Move | str | None], name: str = "callable"):
        self._func = func
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def pick_action(self, run_state: RunState) -> Move | None:
        result = self._func(run_state)
        if result is None or isinstance(result, Move):
            return result
        return Move(result)
