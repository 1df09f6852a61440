"""
Domain Events

Immutable records of significant state changes in the domain.
Events decouple side effects (logging, auditing) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event (the file id)
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class FileRegisteredEvent(DomainEvent):
    """
    Event emitted when an upload slot is reserved.

    Attributes:
        owner_id: User the file belongs to
        content_type: Declared MIME type
        size: Declared size in bytes
    """
    owner_id: str
    content_type: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "owner_id": self.owner_id,
            "content_type": self.content_type,
            "size": self.size,
        })
        return base_dict


@dataclass(frozen=True)
class FileUploadConfirmedEvent(DomainEvent):
    """Event emitted when a pending file moves to uploaded."""
    owner_id: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict["owner_id"] = self.owner_id
        return base_dict


@dataclass(frozen=True)
class UploadConfirmationSkippedEvent(DomainEvent):
    """
    Event emitted when a confirmation changes nothing.

    Attributes:
        reason: "already_uploaded" or "not_found"
    """
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict["reason"] = self.reason
        return base_dict


@dataclass(frozen=True)
class FileDeletedEvent(DomainEvent):
    """Event emitted when a file record is soft-deleted."""
    pass


@dataclass(frozen=True)
class DownloadAccessDeniedEvent(DomainEvent):
    """
    Event emitted when a download request fails the access rule.

    Attributes:
        requester_id: user_id of the rejected identity ("" when anonymous)
    """
    requester_id: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict["requester_id"] = self.requester_id
        return base_dict
