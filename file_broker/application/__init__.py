"""
Application layer: use-case orchestration over the domain.
"""

from .event_publisher import EventPublisher
from .file_lifecycle_service import FileLifecycleService
from .storage_event_service import StorageEventResult, StorageEventService

__all__ = [
    "EventPublisher",
    "FileLifecycleService",
    "StorageEventResult",
    "StorageEventService",
]
