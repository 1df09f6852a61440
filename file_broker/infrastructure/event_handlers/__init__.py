"""Infrastructure event handlers."""

from file_broker.infrastructure.event_handlers.logging_handler import LoggingEventHandler

__all__ = ["LoggingEventHandler"]
