"""
URL Issuer Factory

Selects the signed URL backend from runtime configuration so the
application layer only ever sees IUrlIssuer.
"""

import logging
import os
from typing import Optional

from file_broker.config.gcs_config import GCSConfig, init_gcs
from file_broker.config.s3_config import S3Config, create_s3_client
from file_broker.domain.file_storage.url_issuer import IUrlIssuer
from file_broker.infrastructure.gcs_url_issuer import GCSUrlIssuer
from file_broker.infrastructure.s3_url_issuer import S3UrlIssuer

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("s3", "gcs")


class UrlIssuerFactory:
    """
    Factory for URL issuer implementations.

    Selection Logic:
    - STORAGE_BACKEND ("s3" or "gcs") picks the backend explicitly
    - Otherwise S3 is used when S3_ENDPOINT and S3_BUCKET are set
    - Otherwise GCS is used when GCS_BUCKET_NAME is set
    """

    @staticmethod
    def resolve_backend(
        s3_config: Optional[S3Config] = None,
        gcs_config: Optional[GCSConfig] = None,
    ) -> Optional[str]:
        """Return the backend name to use, or None if nothing is configured."""
        explicit = os.getenv("STORAGE_BACKEND", "").strip().lower()
        if explicit:
            if explicit not in SUPPORTED_BACKENDS:
                raise ValueError(
                    f"Unsupported STORAGE_BACKEND {explicit!r}; expected one of {SUPPORTED_BACKENDS}"
                )
            return explicit

        s3_config = s3_config or S3Config()
        if s3_config.is_configured:
            return "s3"

        gcs_config = gcs_config or GCSConfig()
        if gcs_config.is_configured:
            return "gcs"

        return None

    @staticmethod
    def create_issuer(
        s3_config: Optional[S3Config] = None,
        gcs_config: Optional[GCSConfig] = None,
    ) -> IUrlIssuer:
        """
        Create the URL issuer for the configured backend.

        Raises:
            ValueError: If the selected backend is missing required settings
            RuntimeError: If no storage backend is configured at all
        """
        s3_config = s3_config or S3Config()
        gcs_config = gcs_config or GCSConfig()

        backend = UrlIssuerFactory.resolve_backend(s3_config, gcs_config)
        if backend is None:
            raise RuntimeError(
                "No storage backend configured: set S3_ENDPOINT/S3_BUCKET or GCS_BUCKET_NAME"
            )

        if backend == "s3":
            if not s3_config.is_configured:
                raise ValueError("S3 backend requires S3_ENDPOINT and S3_BUCKET")
            logger.info(f"Using S3 URL issuer for bucket {s3_config.bucket}")
            return S3UrlIssuer(
                create_s3_client(s3_config),
                s3_config.bucket,
                external_host=s3_config.external_host,
            )

        if not gcs_config.is_configured:
            raise ValueError("GCS backend requires GCS_BUCKET_NAME")
        logger.info(f"Using GCS URL issuer for bucket {gcs_config.bucket_name}")
        return GCSUrlIssuer(init_gcs(gcs_config))
