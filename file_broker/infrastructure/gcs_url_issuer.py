"""
Google Cloud Storage URL Issuer

Signs V4 URLs for direct browser uploads and downloads against a GCS bucket.
"""

import logging
from datetime import timedelta

from google.cloud import storage

from file_broker.domain.file_storage.url_issuer import IUrlIssuer, UrlIssuerError

logger = logging.getLogger(__name__)

# Extension header GCS enforces on signed PUT requests
CONTENT_LENGTH_RANGE_HEADER = "x-goog-content-length-range"


class GCSUrlIssuer(IUrlIssuer):
    """
    Issues V4 signed URLs for objects in one GCS bucket.

    Upload URLs bind the content type and carry the content-length-range
    extension header, so GCS rejects bodies larger than the declared limit.
    The uploading client must send the same header with its PUT.
    """

    backend_name = "gcs"

    def __init__(self, bucket: storage.Bucket):
        """
        Initialize GCS URL issuer.

        Args:
            bucket: Bucket reference from the GCS client
        """
        if bucket is None:
            raise ValueError("GCS bucket is required")
        self.bucket = bucket

    def issue_upload_url(
        self, storage_path: str, content_type: str, max_size: int, ttl: timedelta
    ) -> str:
        try:
            blob = self.bucket.blob(storage_path)
            return blob.generate_signed_url(
                version="v4",
                expiration=ttl,
                method="PUT",
                content_type=content_type,
                headers={CONTENT_LENGTH_RANGE_HEADER: f"0,{max_size}"},
            )
        except Exception as e:
            raise UrlIssuerError(f"Failed to sign GCS upload URL: {e}") from e

    def issue_download_url(self, storage_path: str, ttl: timedelta) -> str:
        try:
            blob = self.bucket.blob(storage_path)
            return blob.generate_signed_url(
                version="v4",
                expiration=ttl,
                method="GET",
            )
        except Exception as e:
            raise UrlIssuerError(f"Failed to sign GCS download URL: {e}") from e
