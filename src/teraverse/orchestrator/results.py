"""
Operation results returned to UI code.

Orchestrators catch API failures at the operation boundary and report
them here instead of raising.
"""

from dataclasses import dataclass, field
from typing import Any

from teraverse.history.record import HistoryRecord
from teraverse.vocabulary import ClaimCategory, LoopExitReason


@dataclass
class OperationResult:
    """
    Outcome of a single user-facing operation.
    """
    success: bool
    data: Any = None
    error: str | None = None
    skipped: bool = False

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        """Create successful result."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        """Create failed result."""
        return cls(success=False, error=error)

    @classmethod
    def skip(cls, reason: str) -> "OperationResult":
        """Create result for an operation that was not attempted."""
        return cls(success=False, error=reason, skipped=True)


@dataclass
class LoopResult:
    """Result of one auto-play loop invocation."""
    exit_reason: LoopExitReason
    steps_taken: int = 0
    moves_submitted: int = 0
    moves_failed: int = 0
    history_record: HistoryRecord | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.exit_reason == LoopExitReason.ALREADY_RUNNING

    @property
    def run_ended(self) -> bool:
        return self.exit_reason == LoopExitReason.RUN_ENDED


@dataclass
class ClaimBatchResult:
    """Result of one bulk-claim pass."""
    category: ClaimCategory
    planned: list[str] = field(default_factory=list)
    claimed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def success(self) -> bool:
        return not self.skipped and not self.failed and not self.errors

    @property
    def attempted(self) -> int:
        return len(self.claimed) + len(self.failed)
