"""
S3 / MinIO URL Issuer

Presigns URLs against an S3-compatible store with boto3.
Signing happens locally; no request reaches the store.
"""

import logging
from datetime import timedelta
from typing import Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from botocore.exceptions import BotoCoreError, ClientError

from file_broker.domain.file_storage.url_issuer import IUrlIssuer, UrlIssuerError

logger = logging.getLogger(__name__)

CONTENT_LENGTH_RANGE_PARAM = "x-amz-content-length-range"

# Carried from the PutObject params to the signer through the request context;
# boto3 has no parameter for it.
_LENGTH_RANGE_PARAM = "ContentLengthRange"
_LENGTH_RANGE_CONTEXT_KEY = "file_broker_content_length_range"


def _stash_length_range(params, context, **kwargs):
    length_range = params.pop(_LENGTH_RANGE_PARAM, None)
    if length_range is not None:
        context[_LENGTH_RANGE_CONTEXT_KEY] = length_range


def _add_length_range_param(request, **kwargs):
    length_range = request.context.get(_LENGTH_RANGE_CONTEXT_KEY)
    if length_range is None:
        return
    parts = urlsplit(request.url)
    extra = urlencode({CONTENT_LENGTH_RANGE_PARAM: length_range})
    query = f"{parts.query}&{extra}" if parts.query else extra
    request.url = urlunsplit(parts._replace(query=query))


class S3UrlIssuer(IUrlIssuer):
    """
    Issues presigned PUT/GET URLs for one bucket.

    Upload URLs sign the Content-Type header, so the client must PUT with
    the declared type, and carry the allowed size range as a signed query
    parameter.

    When an external host is configured, the host of every signed URL is
    replaced with it and the scheme forced to https. This serves clients
    that reach the store through a public proxy while the service talks to
    it on an internal address.
    """

    backend_name = "s3"

    def __init__(self, client, bucket: str, external_host: Optional[str] = None):
        """
        Initialize S3 URL issuer.

        Args:
            client: boto3 S3 client configured with region and credentials
            bucket: Bucket holding the files
            external_host: Public host substituted into signed URLs
        """
        if not bucket:
            raise ValueError("S3 bucket is required")
        self.client = client
        self.bucket = bucket
        self.external_host = _strip_scheme(external_host) if external_host else None

        events = client.meta.events
        events.register(
            "provide-client-params.s3.PutObject",
            _stash_length_range,
            unique_id="file-broker-stash-length-range",
        )
        events.register(
            "before-sign.s3.PutObject",
            _add_length_range_param,
            unique_id="file-broker-add-length-range",
        )

    def issue_upload_url(
        self, storage_path: str, content_type: str, max_size: int, ttl: timedelta
    ) -> str:
        try:
            url = self.client.generate_presigned_url(
                ClientMethod="put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": storage_path,
                    "ContentType": content_type,
                    _LENGTH_RANGE_PARAM: f"0,{max_size}",
                },
                ExpiresIn=int(ttl.total_seconds()),
                HttpMethod="PUT",
            )
        except (BotoCoreError, ClientError) as e:
            raise UrlIssuerError(f"Failed to presign S3 upload URL: {e}") from e
        return self._public_url(url)

    def issue_download_url(self, storage_path: str, ttl: timedelta) -> str:
        try:
            url = self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": storage_path},
                ExpiresIn=int(ttl.total_seconds()),
            )
        except (BotoCoreError, ClientError) as e:
            raise UrlIssuerError(f"Failed to presign S3 download URL: {e}") from e
        return self._public_url(url)

    def _public_url(self, url: str) -> str:
        if not self.external_host:
            return url
        parts = urlsplit(url)
        return urlunsplit(("https", self.external_host, parts.path, parts.query, parts.fragment))


def _strip_scheme(host: str) -> str:
    if "://" in host:
        return urlsplit(host).netloc
    return host.rstrip("/")
