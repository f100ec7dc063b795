"""
Retry policy for background refreshes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff.

    Attempt numbers start at 1; `delay_for(1)` is the wait before the
    first retry.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number `attempt`."""
        delay = self.base_delay * (self.multiplier ** max(0, attempt - 1))
        return min(self.max_delay, delay)

    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt is allowed after `attempt` failures."""
        return attempt < self.max_attempts
