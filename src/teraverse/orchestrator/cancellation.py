"""
Cooperative cancellation for the auto-play loop.
"""

import asyncio


class CancellationToken:
    """
    One-shot cancellation flag with a cancellable wait.

    The loop polls `cancelled` at its suspension points; `wait` returns
    early as soon as `cancel()` is called.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self, seconds: float) -> bool:
        """
        Sleep up to `seconds`.

        Returns:
            True if cancelled before or during the wait
        """
        if self._event.is_set():
            return True
        if seconds <= 0:
            return False
        try:
            await asyncio.wait_for(self._event.wait(), seconds)
        except asyncio.TimeoutError:
            return False
        return True
