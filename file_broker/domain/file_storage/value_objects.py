"""
File Storage Value Objects

Immutable value objects for type safety and validation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class FileStatus(Enum):
    """Upload status of a tracked file. Only moves forward."""

    PENDING = "pending"
    UPLOADED = "uploaded"


READ_SCOPE_TEMPLATE = "file:{file_id}:read"


def read_scope_for(file_id: str) -> str:
    """
    Build the sharing scope that grants read access to one file.

    Args:
        file_id: File identifier

    Returns:
        Scope string of the form ``file:{file_id}:read``
    """
    return READ_SCOPE_TEMPLATE.format(file_id=file_id)


@dataclass(frozen=True)
class Identity:
    """
    Value object representing an authenticated requester.

    Established by the authentication adapter from a bearer token and passed
    into every operation that needs an authorization decision.
    """
    user_id: str
    scopes: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, user_id: Optional[str], scopes: Optional[Iterable[str]] = None) -> 'Identity':
        """
        Build an identity, dropping empty scope entries.

        Args:
            user_id: Subject of the token (``None`` becomes an empty string)
            scopes: Iterable of scope strings

        Returns:
            New Identity instance
        """
        cleaned = frozenset(s for s in (scopes or ()) if s)
        return cls(user_id=user_id or "", scopes=cleaned)

    def has_scope(self, scope: str) -> bool:
        """Exact-match scope membership check."""
        return scope in self.scopes


@dataclass(frozen=True)
class UploadSlot:
    """Result of reserving an upload: the new file id and its signed PUT URL."""
    file_id: str
    upload_url: str

    def to_dict(self) -> dict:
        return {"file_id": self.file_id, "upload_url": self.upload_url}


@dataclass(frozen=True)
class DownloadLink:
    """Result of an authorized download request."""
    download_url: str

    def to_dict(self) -> dict:
        return {"download_url": self.download_url}


class ConfirmOutcome(Enum):
    """What a confirmation did. All three outcomes are successes."""

    CONFIRMED = "confirmed"
    ALREADY_UPLOADED = "already_uploaded"
    NOT_FOUND = "not_found"
