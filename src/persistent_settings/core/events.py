"""Event system for observing settings managers."""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Callable
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can be emitted."""

    # Lifecycle events
    SETTINGS_LOADED = "settings_loaded"
    SETTINGS_SAVED = "settings_saved"
    SETTINGS_RESET = "settings_reset"
    SETTINGS_DELETED = "settings_deleted"

    # State events
    SAVED_STATE_CHANGED = "saved_state_changed"
    PROPERTY_CHANGED = "property_changed"


@dataclass
class Event:
    """An event with type, emitting manager and associated data."""

    type: EventType
    source: Any = None
    data: Any = None


class EventBus:
    """Simple event bus for publish/subscribe communication."""

    def __init__(self):
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """Subscribe to events of a specific type.

        Subscribing the same callback twice has no effect.

        Args:
            event_type: The type of event to subscribe to
            callback: Function to call when event is published
        """
        callbacks = self._subscribers.setdefault(event_type, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """Unsubscribe from events of a specific type.

        Unknown callbacks are ignored.
        """
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers.

        A failing subscriber is logged and does not stop the others.

        Args:
            event: The event to publish
        """
        for callback in list(self._subscribers.get(event.type, ())):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")

