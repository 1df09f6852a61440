"""
Google Cloud Storage Configuration

Manages GCS client initialization and configuration.
"""

import logging
import os
from typing import Optional

from google.cloud import storage
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


class GCSConfig:
    """GCS configuration settings."""

    def __init__(self):
        self.bucket_name = os.getenv("GCS_BUCKET_NAME")
        self.credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

    @property
    def is_configured(self) -> bool:
        return bool(self.bucket_name)


def init_gcs(config: Optional[GCSConfig] = None) -> Optional[storage.Bucket]:
    """
    Initialize Google Cloud Storage client and bucket reference.

    Signing V4 URLs needs service-account credentials; default credentials
    work on GCE/Cloud Run where the metadata server can sign.

    Args:
        config: GCS configuration, uses default if None

    Returns:
        Bucket reference, or None if GCS is not configured
    """
    if config is None:
        config = GCSConfig()

    if not config.is_configured:
        logger.info("GCS_BUCKET_NAME not set, GCS integration disabled")
        return None

    if config.credentials_path and os.path.exists(config.credentials_path):
        credentials = service_account.Credentials.from_service_account_file(
            config.credentials_path
        )
        client = storage.Client(credentials=credentials)
        logger.info(f"GCS client initialized with service account: {config.credentials_path}")
    else:
        client = storage.Client()
        logger.info("GCS client initialized with default credentials")

    bucket = client.bucket(config.bucket_name)
    logger.info(f"GCS initialized with bucket: {config.bucket_name}")
    return bucket
