"""
History Bus — fan-out of new history records to subscribers.

Failing subscribers are logged but don't halt delivery to the others.
"""

from dataclasses import dataclass, field
from datetime import datetime
from itertools import count
from typing import Callable

from teraverse.history.record import HistoryRecord
from teraverse.observability import get_logger

logger = get_logger("history.bus")

HistoryHandler = Callable[[HistoryRecord], None]


@dataclass
class DeliveryFailure:
    """Record of a failed delivery to one subscriber."""
    subscription_id: int
    exception: Exception
    timestamp: datetime = field(default_factory=datetime.now)


class HistoryBus:
    """
    Publish/subscribe channel for HistoryRecord additions.
    """

    def __init__(self):
        self._subscribers: dict[int, HistoryHandler] = {}
        self._ids = count(1)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, handler: HistoryHandler) -> int:
        """Subscribe a handler. Returns an id for `unsubscribe`."""
        subscription_id = next(self._ids)
        self._subscribers[subscription_id] = handler
        return subscription_id

    def unsubscribe(self, subscription_id: int) -> bool:
        """Remove a subscription. Returns True if it existed."""
        return self._subscribers.pop(subscription_id, None) is not None

    def publish(self, record: HistoryRecord) -> tuple[list[int], list[DeliveryFailure]]:
        """
        Deliver a record to every subscriber.

        Returns tuple of (delivered_to, failures).
        """
        delivered_to: list[int] = []
        failures: list[DeliveryFailure] = []

        for subscription_id, handler in list(self._subscribers.items()):
            try:
                handler(record)
                delivered_to.append(subscription_id)
            except Exception as exc:
                failures.append(DeliveryFailure(subscription_id=subscription_id, exception=exc))
                logger.error(
                    f"Failed to deliver history record to subscriber {subscription_id}: {exc}",
                    exc_info=True
                )

        return delivered_to, failures
