"""
Decision Provider — the contract for anything that picks the next move.

Providers are black boxes: given the current run snapshot they return a
move, or None when they have nothing to propose.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from teraverse.schemas import RunState
from teraverse.vocabulary import Move


@runtime_checkable
class DecisionProvider(Protocol):
    """
    Protocol for move pickers.
    """

    @property
    def name(self) -> str:
        """Identifier recorded in run history."""
        ...

    def pick_action(self, run_state: RunState) -> Move | None:
        """Next move for this snapshot, or None."""
        ...


class BaseProvider(ABC):
    """
    Abstract base class for provider implementations.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def pick_action(self, run_state: RunState) -> Move | None:
        pass

    def __repr__(self) -> str:
        return f"<Provider:{self.name}>"
