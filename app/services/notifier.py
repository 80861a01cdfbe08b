import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

logger = logging.getLogger(__name__)

TOPICS = {
    "campaignCreated",
    "campaignUpdated",
    "campaignDeleted",
    "contentPieceCreated",
    "contentPieceUpdated",
    "contentPieceDeleted",
    "aiContentGenerated",
    "contentTranslated",
    "manualVersionCreated",
    "versionUpdated",
    "activeVersionChanged",
}


@dataclass
class PublishedEvent:
    topic: str
    payload: dict[str, Any]
    at: datetime = field(default_factory=datetime.utcnow)


class Notifier(Protocol):
    def publish(self, topic: str, payload: dict[str, Any]) -> None: ...


class NullNotifier:
    def publish(self, topic: str, payload: dict[str, Any]) -> None:
        return None


class Subscription:
    def __init__(self, broker: "EventBroker", topics: set[str], maxsize: int):
        self.broker = broker
        self.topics = topics
        self.queue: queue.Queue[PublishedEvent] = queue.Queue(maxsize=maxsize)

    def wants(self, topic: str) -> bool:
        return not self.topics or topic in self.topics

    def get(self, timeout: float) -> PublishedEvent | None:
        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        self.broker.unsubscribe(self)


class EventBroker:
    """In-process fan-out of mutation events to live subscribers.

    Publishing never blocks and never raises: a subscriber whose queue is full
    misses the event, and delivery errors are logged.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, topics: set[str] | None = None) -> Subscription:
        unknown = (topics or set()) - TOPICS
        if unknown:
            raise ValueError(f"Unknown topics: {', '.join(sorted(unknown))}")
        sub = Subscription(self, set(topics or ()), self.queue_size)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, topic: str, payload: dict[str, Any]) -> None:
        try:
            event = PublishedEvent(topic=topic, payload=payload)
            with self._lock:
                targets = [s for s in self._subscriptions if s.wants(topic)]
            for sub in targets:
                try:
                    sub.queue.put_nowait(event)
                except queue.Full:
                    logger.warning("Dropping %s event for slow subscriber", topic)
        except Exception:
            logger.exception("Failed to publish %s event", topic)


def publish_safely(notifier: Notifier, topic: str, payload: dict[str, Any]) -> None:
    """Publish after a committed mutation; a failing notifier is logged, not raised."""
    try:
        notifier.publish(topic, payload)
    except Exception:
        logger.exception("Notifier failed to publish %s event", topic)


broker = EventBroker()


def get_notifier() -> Notifier:
    return broker
