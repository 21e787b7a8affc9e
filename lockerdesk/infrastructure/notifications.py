"""
In-process notification fan-out.

Publishers call ``NotificationHub.publish`` from any thread. Each subscriber
gets events in the order they were published; nothing is buffered for
subscribers that are gone.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from lockerdesk.core.entities.notification import Notification

logger = logging.getLogger(__name__)

Callback = Callable[[Notification], None]


@dataclass(eq=False)
class Subscription:
    callback: Callback
    name: str
    subscribed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationHub:
    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, callback: Callback, *, name: str = "subscriber") -> Subscription:
        subscription = Subscription(callback=callback, name=name)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("Subscriber %s connected", name)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        logger.debug("Subscriber %s disconnected", subscription.name)

    def publish(self, notification: Notification) -> None:
        # Fire-and-forget: one failing subscriber must not affect the rest or the publisher
        with self._lock:
            subscriptions = list(self._subscriptions)

        for subscription in subscriptions:
            try:
                subscription.callback(notification)
            except Exception:
                logger.exception(
                    "Notification %s could not be delivered to %s",
                    notification.type.value,
                    subscription.name,
                )


class QueueSubscriber:
    """
    Bridges hub callbacks (any thread) into a bounded asyncio queue owned by
    one event loop. When the queue is full the event is dropped for this
    subscriber only.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, *, maxsize: int = 100, name: str = "queue") -> None:
        self._loop = loop
        self.name = name
        self.queue: asyncio.Queue[Dict[str, Any]] = asyncio.Queue(maxsize=maxsize)

    def __call__(self, notification: Notification) -> None:
        self._loop.call_soon_threadsafe(self._offer, notification.to_message())

    def _offer(self, message: Dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping %s event for slow subscriber %s", message["type"], self.name)
