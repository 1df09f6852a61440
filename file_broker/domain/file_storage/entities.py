"""
File Storage Entities

Domain entity for tracked object-storage files.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from .value_objects import FileStatus


def build_storage_path(owner_id: str, file_id: str) -> str:
    """Storage path for a file; always encodes the owner."""
    return f"{owner_id}/{file_id}"


@dataclass
class FileRecord:
    """
    Entity representing one tracked object-storage entry.

    Manages the upload status and soft-delete flag. Identity fields
    (id, owner, storage path, size, content type) never change after creation.
    """
    id: str
    owner_id: str
    storage_path: str
    size: int
    content_type: str
    status: FileStatus
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, owner_id: str, content_type: str, size: int) -> 'FileRecord':
        """
        Factory method to create a new pending file record.

        Args:
            owner_id: User who requested the upload
            content_type: Declared MIME type
            size: Declared size in bytes

        Returns:
            New FileRecord in pending status with a fresh UUID
        """
        now = datetime.utcnow()
        file_id = str(uuid.uuid4())

        return cls(
            id=file_id,
            owner_id=owner_id,
            storage_path=build_storage_path(owner_id, file_id),
            size=size,
            content_type=content_type,
            status=FileStatus.PENDING,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )

    def is_uploaded(self) -> bool:
        return self.status == FileStatus.UPLOADED

    def mark_as_uploaded(self) -> None:
        """Transition pending -> uploaded and refresh updated_at."""
        self.status = FileStatus.UPLOADED
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "storage_path": self.storage_path,
            "size": self.size,
            "content_type": self.content_type,
            "status": self.status.value,
            "is_deleted": self.is_deleted,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'FileRecord':
        """Create FileRecord from dictionary."""
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            storage_path=data["storage_path"],
            size=int(data["size"]),
            content_type=data["content_type"],
            status=FileStatus(data["status"]),
            is_deleted=bool(data.get("is_deleted", False)),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
