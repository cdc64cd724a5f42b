"""
Event management system for camwake.

This module provides a thread-safe event system that lets embedding code
subscribe to camera arrival and departure notices.
"""

import threading
from typing import Any, Callable, Dict, List, Union
import logging

from .models import EventType

logger = logging.getLogger(__name__)


class EventManager:
    """
    Thread-safe event manager for presence events.

    Provides subscription-based event handling with support for multiple
    callbacks per event type and thread-safe event emission.
    """

    def __init__(self):
        """Initialize the event manager with empty subscriber lists."""
        self._subscribers: Dict[str, List[Callable]] = {
            event_type.value: [] for event_type in EventType
        }
        self._lock = threading.RLock()

    @staticmethod
    def _normalize(event_type: Union[str, EventType]) -> str:
        """
        Resolve an event type given as enum member or string value.

        Raises:
            ValueError: If event_type is not a valid EventType
        """
        if isinstance(event_type, EventType):
            return event_type.value
        valid_types = [e.value for e in EventType]
        if event_type not in valid_types:
            raise ValueError(f"Invalid event type '{event_type}'. Must be one of: {valid_types}")
        return event_type

    def subscribe(self, event_type: Union[str, EventType], callback: Callable) -> None:
        """
        Subscribe a callback function to an event type.

        Args:
            event_type: The type of event to subscribe to
            callback: The function to call when the event is emitted

        Raises:
            ValueError: If event_type is not a valid EventType
            TypeError: If callback is not callable
        """
        if not callable(callback):
            raise TypeError("Callback must be callable")

        event_type = self._normalize(event_type)

        with self._lock:
            if callback not in self._subscribers[event_type]:
                self._subscribers[event_type].append(callback)
                logger.debug(f"Subscribed callback to {event_type}")

    def unsubscribe(self, event_type: Union[str, EventType], callback: Callable) -> None:
        """
        Unsubscribe a callback function from an event type.

        Raises:
            ValueError: If event_type is not a valid EventType
        """
        event_type = self._normalize(event_type)

        with self._lock:
            if callback in self._subscribers[event_type]:
                self._subscribers[event_type].remove(callback)
                logger.debug(f"Unsubscribed callback from {event_type}")

    def emit(self, event_type: Union[str, EventType], data: Any = None) -> None:
        """
        Emit an event to all subscribed callbacks.

        If a callback raises an exception, it is logged but does not prevent
        other callbacks from executing.

        Args:
            event_type: The type of event to emit
            data: Optional data to pass to the callbacks

        Raises:
            ValueError: If event_type is not a valid EventType
        """
        event_type = self._normalize(event_type)

        # Copy so callbacks run without holding the lock
        with self._lock:
            callbacks = self._subscribers[event_type].copy()

        logger.debug(f"Emitting {event_type} event to {len(callbacks)} subscribers")

        for callback in callbacks:
            try:
                if data is not None:
                    callback(data)
                else:
                    callback()
            except Exception as e:
                logger.error(f"Error in event callback for {event_type}: {e}")

    def get_subscriber_count(self, event_type: Union[str, EventType]) -> int:
        """Get the number of subscribers for a given event type."""
        event_type = self._normalize(event_type)

        with self._lock:
            return len(self._subscribers[event_type])

    def clear_subscribers(self, event_type: Union[str, EventType, None] = None) -> None:
        """
        Clear all subscribers for a specific event type or all event types.

        Args:
            event_type: The event type to clear. If None, clears all event types.
        """
        with self._lock:
            if event_type is not None:
                self._subscribers[self._normalize(event_type)].clear()
            else:
                for event_list in self._subscribers.values():
                    event_list.clear()
        logger.debug(f"Cleared subscribers for {event_type or 'all event types'}")
