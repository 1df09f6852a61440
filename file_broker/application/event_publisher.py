"""
Event Publisher

Application service for publishing domain events to registered handlers.
Enables decoupling of side effects from core business logic.
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, Type

from file_broker.domain.events import DomainEvent

logger = logging.getLogger(__name__)


class EventPublisher:
    """
    Event publisher that dispatches domain events to registered handlers.

    Handlers run synchronously in registration order. Handler exceptions are
    caught and logged so that side effects never break a file operation.
    Subscribing to ``DomainEvent`` receives every event.

    Thread-safe for concurrent event publishing.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[Callable[[DomainEvent], None]]] = {}
        self._lock = Lock()

    def subscribe(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ) -> None:
        """
        Register a handler for a specific event type.

        Args:
            event_type: The type of domain event to handle
            handler: Callable that accepts the event as parameter

        Example:
            publisher = EventPublisher()
            publisher.subscribe(FileDeletedEvent, handle_file_deleted)
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

        logger.debug(
            f"Registered handler {getattr(handler, '__name__', repr(handler))} "
            f"for {event_type.__name__}"
        )

    def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to all handlers registered for its type or a base type.

        Args:
            event: The domain event to publish
        """
        event_type = type(event)

        with self._lock:
            handlers = [
                handler
                for registered_type, registered in self._handlers.items()
                if isinstance(event, registered_type)
                for handler in registered
            ]

        if not handlers:
            logger.debug(f"No handlers registered for {event_type.__name__}")
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Side effects must not break the file operation
                logger.error(
                    f"Error in handler {getattr(handler, '__name__', repr(handler))} "
                    f"for {event_type.__name__}: {e}",
                    exc_info=True
                )
