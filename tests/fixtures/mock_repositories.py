"""
Mock Repository Implementations

In-memory implementations of the store and URL issuer interfaces for unit
testing. Both keep a call history for interaction assertions and can be told
to fail so collaborator-failure paths can be exercised.
"""

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Set

from file_broker.domain.errors import FileRecordNotFoundError, FileRecordStatusConflictError
from file_broker.domain.file_storage import (
    FileRecord,
    FileRecordRepository,
    FileStatus,
    IUrlIssuer,
    UrlIssuerError,
)


class StoreUnavailableError(Exception):
    """Simulated metadata store outage."""
    pass


class MockFileRecordRepository(FileRecordRepository):
    """
    In-memory implementation of FileRecordRepository.

    Records are copied on the way in and out, like a real store: mutating a
    returned record does not change what is stored until update() is called.
    """

    def __init__(self):
        self._storage: Dict[str, FileRecord] = {}
        self._call_history: List[Dict[str, Any]] = []
        self.failing_methods: Set[str] = set()

    def _record_call(self, method: str, **args) -> None:
        self._call_history.append({"method": method, "args": args})
        if method in self.failing_methods:
            raise StoreUnavailableError(f"{method} failed")

    def create(self, record: FileRecord) -> FileRecord:
        self._record_call("create", file_id=record.id)
        if record.id in self._storage:
            raise StoreUnavailableError(f"duplicate id {record.id}")
        self._storage[record.id] = replace(record)
        return replace(record)

    def get_by_id(self, file_id: str) -> FileRecord:
        self._record_call("get_by_id", file_id=file_id)
        record = self._storage.get(file_id)
        if record is None or record.is_deleted:
            raise FileRecordNotFoundError(file_id)
        return replace(record)

    def update(
        self, record: FileRecord, expected_status: Optional[FileStatus] = None
    ) -> FileRecord:
        self._record_call(
            "update", file_id=record.id, status=record.status, expected_status=expected_status
        )
        stored = self._storage.get(record.id)
        if stored is None or stored.is_deleted:
            raise FileRecordNotFoundError(record.id)
        if expected_status is not None and stored.status != expected_status:
            raise FileRecordStatusConflictError(record.id)
        stored.status = record.status
        stored.updated_at = datetime.utcnow()
        return replace(stored)

    def soft_delete(self, file_id: str) -> None:
        self._record_call("soft_delete", file_id=file_id)
        stored = self._storage.get(file_id)
        if stored is None or stored.is_deleted:
            raise FileRecordNotFoundError(file_id)
        stored.is_deleted = True
        stored.updated_at = datetime.utcnow()

    # Inspection helpers

    def raw(self, file_id: str) -> Optional[FileRecord]:
        """Stored record including soft-deleted ones."""
        return self._storage.get(file_id)

    def put(self, record: FileRecord) -> None:
        """Seed a record without recording a call."""
        self._storage[record.id] = replace(record)

    def calls(self, method: str) -> List[Dict[str, Any]]:
        return [c for c in self._call_history if c["method"] == method]

    def get_call_history(self) -> List[Dict[str, Any]]:
        return list(self._call_history)

    def count(self) -> int:
        return len(self._storage)


class MockUrlIssuer(IUrlIssuer):
    """Deterministic URL issuer that encodes its inputs into the URL."""

    backend_name = "mock"

    def __init__(self, base_url: str = "https://storage.test"):
        self.base_url = base_url
        self.fail = False
        self._call_history: List[Dict[str, Any]] = []

    def issue_upload_url(
        self, storage_path: str, content_type: str, max_size: int, ttl: timedelta
    ) -> str:
        self._call_history.append({
            "method": "issue_upload_url",
            "args": {
                "storage_path": storage_path,
                "content_type": content_type,
                "max_size": max_size,
                "ttl": ttl,
            },
        })
        if self.fail:
            raise UrlIssuerError("signing failed")
        return f"{self.base_url}/{storage_path}?op=put&expires={int(ttl.total_seconds())}"

    def issue_download_url(self, storage_path: str, ttl: timedelta) -> str:
        self._call_history.append({
            "method": "issue_download_url",
            "args": {"storage_path": storage_path, "ttl": ttl},
        })
        if self.fail:
            raise UrlIssuerError("signing failed")
        return f"{self.base_url}/{storage_path}?op=get&expires={int(ttl.total_seconds())}"

    def calls(self, method: str) -> List[Dict[str, Any]]:
        return [c for c in self._call_history if c["method"] == method]
