"""
Action token tracking.

The game API requires the most recently issued action token on every
mutating call. The tracker is the only holder of that token.
"""

from datetime import datetime
from typing import Any, Union

from teraverse.observability import get_logger

logger = get_logger("state.token")

ActionToken = Union[str, int]


class ActionTokenTracker:
    """
    Holds the single opaque action token.

    Every server response is offered to `observe`; a missing or empty token
    leaves the current one in place so the latest real token always wins.
    """

    def __init__(self, initial: ActionToken | None = None):
        self._token: ActionToken | None = None
        self.updated_at: datetime | None = None
        self.updates = 0
        if initial is not None:
            self.update(initial)

    @property
    def current(self) -> ActionToken | None:
        return self._token

    def for_request(self) -> ActionToken:
        """Token to send with the next mutating call ("" before the first one)."""
        return self._token if self._token is not None else ""

    def update(self, token: ActionToken | None) -> bool:
        """Record a token from a response. Returns True if it was stored."""
        if token is None or token == "":
            return False
        self._token = token
        self.updated_at = datetime.now()
        self.updates += 1
        logger.debug(f"Action token updated ({self.updates} updates)")
        return True

    def observe(self, response: Any) -> bool:
        """Pull `action_token` off any response object that carries one."""
        return self.update(getattr(response, "action_token", None))

    def clear(self) -> None:
        """Forget the token (logout)."""
        self._token = None
        self.updated_at = None
