"""
File Storage Repositories

Repository interface for file record persistence.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import FileRecord
from .value_objects import FileStatus


class FileRecordRepository(ABC):
    """
    Abstract repository interface for file record persistence.

    Contract Guarantees:
    - Soft-deleted records are invisible to get_by_id, update and soft_delete,
      which raise FileRecordNotFoundError for them.
    - update and soft_delete are atomic with respect to their own
      read-modify-write on a single record; update with expected_status is
      a compare-and-set on the status.
    - Any other exception signals a store failure.
    """

    @abstractmethod
    def create(self, record: FileRecord) -> FileRecord:
        """
        Persist a new file record.

        Args:
            record: FileRecord to store

        Returns:
            The stored record
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_by_id(self, file_id: str) -> FileRecord:
        """
        Retrieve a live record by id.

        Args:
            file_id: File identifier

        Returns:
            FileRecord

        Raises:
            FileRecordNotFoundError: If missing or soft-deleted
        """
        pass  # pragma: no cover

    @abstractmethod
    def update(
        self, record: FileRecord, expected_status: Optional[FileStatus] = None
    ) -> FileRecord:
        """
        Persist the mutable fields of an existing live record.

        Args:
            record: FileRecord with new status/timestamps
            expected_status: If given, write only when the stored status
                still equals it

        Returns:
            The record as stored

        Raises:
            FileRecordNotFoundError: If missing or soft-deleted
            FileRecordStatusConflictError: If the stored status differs
                from expected_status
        """
        pass  # pragma: no cover

    @abstractmethod
    def soft_delete(self, file_id: str) -> None:
        """
        Mark a live record as deleted.

        Args:
            file_id: File identifier

        Raises:
            FileRecordNotFoundError: If missing or already deleted
        """
        pass  # pragma: no cover
