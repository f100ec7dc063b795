"""
Clients — Game API implementations.

Provides the GameAPI protocol, the HTTP client and an in-memory fake.
"""

from teraverse.clients.base import (
    ActionResponse,
    GameAPI,
    call_with_timeout,
    parse_item_deltas,
)
from teraverse.clients.http_client import (
    GigaverseConfig,
    GigaverseClient,
    create_gigaverse_client,
)
from teraverse.clients.fake import FakeCall, FakeGameAPI, MoveOutcome

__all__ = [
    "ActionResponse",
    "GameAPI",
    "call_with_timeout",
    "parse_item_deltas",
    "GigaverseConfig",
    "GigaverseClient",
    "create_gigaverse_client",
    "FakeCall",
    "FakeGameAPI",
    "MoveOutcome",
]
