"""
Ordered, multi-subscriber delivery of call events.

The call controller is the only producer. Subscribers registered with
``subscribe`` are invoked synchronously in subscription order; asyncio consumers
can iterate ``stream()`` instead, which hands events over through a per-consumer
queue. Events published before a subscriber registers are not replayed.
"""

import asyncio
import logging
import threading
from typing import AsyncIterator, Callable, List

from vapi_client.config.constants import LOGGER_NAME
from vapi_client.models.events import Event

logger = logging.getLogger(LOGGER_NAME)

EventCallback = Callable[[Event], None]


class Subscription:
    """Handle returned by EventBus.subscribe."""

    def __init__(self, bus: "EventBus", callback: EventCallback):
        self._bus = bus
        self.callback = callback

    def unsubscribe(self) -> None:
        self._bus._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()


class EventBus:
    """Broadcasts events to every current subscriber in production order."""

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        # Held for the whole delivery so events from different threads never interleave
        self._lock = threading.RLock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, callback: EventCallback) -> Subscription:
        """
        Register a callback for every event published from now on.

        Args:
            callback: Called with each event on the publishing thread

        Returns:
            A subscription that can be used to unsubscribe
        """
        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def publish(self, event: Event) -> None:
        """Deliver ``event`` to all current subscribers."""
        with self._lock:
            subscribers = list(self._subscriptions)
            logger.debug(f"Publishing {event.type} to {len(subscribers)} subscriber(s)")
            for subscription in subscribers:
                try:
                    subscription.callback(event)
                except Exception as e:
                    logger.error(f"Event subscriber failed on {event.type}: {e}", exc_info=True)

    async def stream(self) -> AsyncIterator[Event]:
        """
        Iterate over events as they are published.

        The subscription is registered when iteration starts and removed when
        the consumer stops iterating.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        def enqueue(event: Event) -> None:
            loop.call_soon_threadsafe(queue.put_nowait, event)

        subscription = self.subscribe(enqueue)
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.unsubscribe()
