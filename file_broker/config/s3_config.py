"""
S3 / MinIO Configuration

Reads connection settings for an S3-compatible object store and builds the
boto3 client used for presigning.
"""

import logging
import os
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import boto3
from botocore.config import Config as BotoConfig

logger = logging.getLogger(__name__)


class S3Config:
    """S3-compatible storage configuration settings."""

    def __init__(self):
        raw_endpoint = os.getenv("S3_ENDPOINT", "")
        self.access_key = os.getenv("S3_ACCESS_KEY", "")
        self.secret_key = os.getenv("S3_SECRET_KEY", "")
        self.bucket = os.getenv("S3_BUCKET", "")
        self.region = os.getenv("S3_REGION", "us-east-1")
        self.use_ssl = os.getenv("S3_USE_SSL", "false").lower() == "true"
        self.external_host: Optional[str] = os.getenv("S3_EXTERNAL_HOST") or None

        # An explicit scheme on the endpoint wins over S3_USE_SSL
        self.endpoint = raw_endpoint
        if "://" in raw_endpoint:
            parsed = urlparse(raw_endpoint)
            self.endpoint = parsed.netloc
            self.use_ssl = parsed.scheme == "https"

    @property
    def endpoint_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.endpoint}"

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.bucket)


def create_s3_client(config: Optional[S3Config] = None):
    """
    Create a boto3 S3 client for the configured endpoint.

    Path-style addressing keeps the bucket in the URL path, which MinIO
    requires, and SigV4 lets presigned URLs carry signed headers.

    Args:
        config: S3 configuration, uses default if None

    Returns:
        boto3 S3 client
    """
    if config is None:
        config = S3Config()

    client_kwargs: Dict[str, Any] = {
        "endpoint_url": config.endpoint_url,
        "region_name": config.region,
        "config": BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
    }
    if config.access_key and config.secret_key:
        client_kwargs["aws_access_key_id"] = config.access_key
        client_kwargs["aws_secret_access_key"] = config.secret_key

    logger.info(f"S3 client configured for endpoint {config.endpoint_url}")
    return boto3.client("s3", **client_kwargs)
