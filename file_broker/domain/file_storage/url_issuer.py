"""
URL Issuer Interface

Abstract interface for producing time-limited signed URLs against the
object store. Keeps the lifecycle service independent of any specific
storage provider SDK.
"""

from abc import ABC, abstractmethod
from datetime import timedelta


class UrlIssuerError(Exception):
    """Raised by issuer implementations when signing fails."""
    pass


class IUrlIssuer(ABC):
    """
    Unified interface for signed URL generation.

    Implementations sign URLs locally or through the provider SDK; they never
    transfer file bytes.
    """

    # Short name reported by health checks (e.g. "s3", "gcs")
    backend_name: str = "unknown"

    @abstractmethod
    def issue_upload_url(
        self, storage_path: str, content_type: str, max_size: int, ttl: timedelta
    ) -> str:
        """
        Create a signed PUT URL for one object.

        Args:
            storage_path: Object key (``owner_id/file_id``)
            content_type: MIME type the client must send
            max_size: Largest accepted body in bytes
            ttl: How long the URL stays valid

        Returns:
            Signed upload URL

        Raises:
            UrlIssuerError: If signing fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def issue_download_url(self, storage_path: str, ttl: timedelta) -> str:
        """
        Create a signed GET URL for one object.

        Args:
            storage_path: Object key
            ttl: How long the URL stays valid

        Returns:
            Signed download URL

        Raises:
            UrlIssuerError: If signing fails
        """
        pass  # pragma: no cover
