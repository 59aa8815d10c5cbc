import logging
import queue
import threading
from typing import List, Optional

logger = logging.getLogger(__name__)


class Subscription:
    """Per-subscriber bounded buffer of progress lines."""

    def __init__(self, max_buffer: int = 1000):
        self._queue: "queue.Queue[str]" = queue.Queue(maxsize=max_buffer)
        self.dropped = 0

    def offer(self, message: str) -> bool:
        """Queue a line without blocking; drops it when the buffer is full."""
        try:
            self._queue.put_nowait(message)
            return True
        except queue.Full:
            self.dropped += 1
            return False

    def get_nowait(self) -> Optional[str]:
        """Next buffered line, or None if the buffer is empty."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None


class ProgressBroadcaster:
    """Fans progress lines out to every live subscriber.

    Delivery is at-most-once: subscribers only see lines broadcast while they
    are subscribed, and a subscriber that falls behind loses lines rather than
    slowing down the producer.
    """

    def __init__(self, max_buffer: int = 1000):
        self.max_buffer = max_buffer
        self._lock = threading.Lock()
        self._subscribers: List[Subscription] = []

    def subscribe(self) -> Subscription:
        subscription = Subscription(self.max_buffer)
        with self._lock:
            self._subscribers.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)

    def broadcast(self, message: str) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for subscription in subscribers:
            if not subscription.offer(message):
                logger.debug("Subscriber buffer full; dropped progress line")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
