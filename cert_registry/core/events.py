import threading
from typing import Any, Callable

from cert_registry.core.models.base import Event, EventTypes
from cert_registry.logging_config import logger

Subscriber = Callable[[Event], None]


class NotificationLog:
    """Append-only log of the notifications produced by committed registry calls.

    Writers `append_events` while they hold the registry transaction and
    `publish` the returned events once it is released, so subscriber callbacks
    never run under the writer lock. Consumers either poll with `read` from a
    known position or register a callback with `subscribe`; a failing callback
    is logged and does not affect the commit that produced the events.
    """

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._events)

    def append_events(
        self, events: list[tuple[EventTypes, dict[str, Any]]]
    ) -> list[Event]:
        """Append several events in order as one contiguous block."""
        with self._lock:
            start = len(self._events)
            created = [
                Event(position=start + offset, event_type=event_type, attributes=attrs)
                for offset, (event_type, attrs) in enumerate(events)
            ]
            self._events.extend(created)

        for event in created:
            logger.debug(f"Event {event.position}: {event.event_type.value}")

        return created

    def publish(self, events: list[Event]) -> None:
        """Hand already appended events to every current subscriber."""
        with self._lock:
            subscribers = list(self._subscribers)

        for event in events:
            for subscriber in subscribers:
                self._notify(subscriber, event)

    def create_event(self, event_type: EventTypes, **attributes: Any) -> Event:
        """Append a single event and notify subscribers."""
        return self.batch_create_events([(event_type, attributes)])[0]

    def batch_create_events(
        self, events: list[tuple[EventTypes, dict[str, Any]]]
    ) -> list[Event]:
        """Append several events and notify subscribers straight away."""
        created = self.append_events(events)
        self.publish(created)
        return created

    def read(
        self, from_position: int = 0, event_type: EventTypes | None = None
    ) -> list[Event]:
        """Return the events at or after `from_position`, optionally filtered."""
        if from_position < 0:
            raise ValueError(f"from_position must be >= 0, got {from_position}")

        events = self._events[from_position:]
        if event_type is not None:
            events = [event for event in events if event.event_type == event_type]
        return events

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a callback for future events; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return unsubscribe

    @staticmethod
    def _notify(subscriber: Subscriber, event: Event) -> None:
        try:
            subscriber(event)
        except Exception as e:
            logger.error(
                f"Subscriber {subscriber!r} failed on event {event.position}: {str(e)}"
            )
