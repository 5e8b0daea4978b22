# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Host event bus for the analytics bridge.

The embedding host (webview shell, page wrapper, test harness) publishes
its lifecycle signals here: connectivity restored, page loaded, and
inbound messages from the parent context. The delivery dispatcher
subscribes to them to flush queued payloads and to pick up the
negotiated parent origin.

The bus is synchronous: the host runs every callback on a single thread,
so handlers run one after another in subscription order.

Example:
    from brainmatch_analytics.infrastructure.events import HostEventBus, HostEvents

    bus = HostEventBus()
    bus.subscribe(HostEvents.ONLINE, lambda event: dispatcher.flush_pending())

    # Host side
    bus.publish(HostEvents.ONLINE)
    bus.publish(HostEvents.MESSAGE, {"type": "ANALYTICS_CONFIG", "parentOrigin": "https://play.example"})
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Type alias for event handlers
EventHandler = Callable[["EventData"], None]


@dataclass
class EventData:
    """Container for a published event.

    Attributes:
        event_type: The event type string.
        payload: The event payload (message data for "message" events).
    """

    event_type: str
    payload: Any = None


class HostEventBus:
    """Synchronous event bus keyed by exact event type.

    Attributes:
        _handlers: Dictionary mapping event types to handler lists.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type.

        Args:
            event_type: Event type string.
            handler: Function called with the EventData when published.
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Subscribed handler to: %s", event_type)

    def publish(self, event_type: str, payload: Any = None) -> EventData:
        """Publish an event to its subscribers.

        Errors in individual handlers are logged but don't stop
        other handlers from executing.

        Args:
            event_type: The event type string.
            payload: Event data.

        Returns:
            The published EventData.
        """
        event = EventData(event_type=event_type, payload=payload)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers for event: %s", event_type)
            return event

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Handler error for event %s: %s",
                    event_type,
                    str(e),
                    exc_info=True,
                )

        return event
