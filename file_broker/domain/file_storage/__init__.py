"""
File Storage Domain

Handles tracked file records, signed URL issuance contracts and access rules.
"""

from .access_policy import can_read
from .entities import FileRecord, build_storage_path
from .repositories import FileRecordRepository
from .url_issuer import IUrlIssuer, UrlIssuerError
from .value_objects import (
    ConfirmOutcome,
    DownloadLink,
    FileStatus,
    Identity,
    UploadSlot,
    read_scope_for,
)

__all__ = [
    "FileRecord",
    "FileRecordRepository",
    "FileStatus",
    "Identity",
    "IUrlIssuer",
    "UrlIssuerError",
    "UploadSlot",
    "DownloadLink",
    "ConfirmOutcome",
    "build_storage_path",
    "can_read",
    "read_scope_for",
]
