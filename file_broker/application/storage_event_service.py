"""
Storage Event Application Service

Message-handler entry point for object-store notifications. Turns a
provider payload into file ids and drives upload confirmation, either
inline or by handing each id to a background dispatcher.
"""

import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import unquote_plus

from file_broker.application.file_lifecycle_service import FileLifecycleService
from file_broker.domain.errors import DomainError
from file_broker.domain.file_storage import ConfirmOutcome

logger = logging.getLogger(__name__)

S3_OBJECT_CREATED_PREFIX = "s3:ObjectCreated:"
GCS_OBJECT_FINALIZE = "OBJECT_FINALIZE"


def file_id_from_object_key(key: str) -> Optional[str]:
    """
    Extract the file id from an object key.

    Keys look like ``owner_id/file_id`` and may arrive URL-encoded.
    Keys with fewer than two path segments are not ours.

    Args:
        key: Raw object key from the notification

    Returns:
        The last path segment, or None if the key is not a file key
    """
    if not key:
        return None

    decoded = unquote_plus(key)
    parts = decoded.split("/")
    if len(parts) < 2 or not parts[-1]:
        logger.warning(f"Invalid object key format: {decoded}")
        return None

    return parts[-1]


def extract_created_object_keys(payload: Any) -> List[str]:
    """
    Collect keys of newly created objects from a provider notification.

    Supports S3/MinIO bucket notifications (``Records[]``) and Google Cloud
    Storage Pub/Sub push messages. Other events are ignored.

    Args:
        payload: Decoded JSON body

    Returns:
        Object keys in notification order
    """
    if not isinstance(payload, dict):
        return []

    if "Records" in payload:
        return _s3_created_keys(payload.get("Records"))

    if "message" in payload:
        key = _gcs_finalized_key(payload.get("message"))
        return [key] if key else []

    return []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _s3_created_keys(records: Any) -> List[str]:
    if not isinstance(records, list):
        logger.warning("Ignoring S3 notification whose Records is not a list")
        return []

    keys = []
    for record in records:
        if not isinstance(record, dict):
            continue
        event_name = record.get("eventName")
        if not isinstance(event_name, str) or not event_name.startswith(S3_OBJECT_CREATED_PREFIX):
            continue
        key = _as_dict(_as_dict(record.get("s3")).get("object")).get("key")
        if isinstance(key, str) and key:
            keys.append(key)
        else:
            logger.warning(f"Ignoring {event_name} record without an object key")
    return keys


def _gcs_finalized_key(message: Any) -> Optional[str]:
    message = _as_dict(message)
    attributes = _as_dict(message.get("attributes"))
    if attributes.get("eventType") != GCS_OBJECT_FINALIZE:
        return None

    object_id = attributes.get("objectId")
    if isinstance(object_id, str) and object_id:
        return object_id

    # Fall back to the object resource carried in the message body
    data = message.get("data")
    if not isinstance(data, str) or not data:
        return None
    try:
        resource = json.loads(base64.b64decode(data).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning(f"Could not decode GCS notification data: {e}")
        return None
    name = resource.get("name") if isinstance(resource, dict) else None
    return name if isinstance(name, str) and name else None


@dataclass
class StorageEventResult:
    """Summary of one processed notification."""
    received: int = 0
    confirmed: int = 0
    already_uploaded: int = 0
    not_found: int = 0
    queued: int = 0
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "received": self.received,
            "confirmed": self.confirmed,
            "already_uploaded": self.already_uploaded,
            "not_found": self.not_found,
            "queued": self.queued,
            "failed": list(self.failed),
        }


class StorageEventService:
    """
    Application service for object-store notifications.

    When a dispatcher is given, file ids are handed to it (e.g. a Celery
    task) and confirmation happens out of band. Otherwise each id is
    confirmed inline. Failures for one object are logged and reported in
    the result; they never stop the remaining objects.
    """

    def __init__(
        self,
        file_service: FileLifecycleService,
        dispatcher: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize StorageEventService.

        Args:
            file_service: Lifecycle service that owns confirmation
            dispatcher: Optional callable that enqueues a file id
        """
        self.file_service = file_service
        self.dispatcher = dispatcher

    def handle_notification(self, payload: Any) -> StorageEventResult:
        """
        Process one notification payload.

        Args:
            payload: Decoded JSON body from the object store

        Returns:
            StorageEventResult with per-outcome counts
        """
        result = StorageEventResult()

        for key in extract_created_object_keys(payload):
            file_id = file_id_from_object_key(key)
            if not file_id:
                continue

            result.received += 1
            if self.dispatcher is not None:
                self._dispatch(file_id, result)
            else:
                self._confirm(file_id, result)

        return result

    def _dispatch(self, file_id: str, result: StorageEventResult) -> None:
        try:
            self.dispatcher(file_id)
            result.queued += 1
        except Exception as e:
            logger.error(f"Failed to enqueue upload confirmation for file {file_id}: {e}")
            # Broker down: confirm inline rather than drop the event
            self._confirm(file_id, result)

    def _confirm(self, file_id: str, result: StorageEventResult) -> None:
        try:
            outcome = self.file_service.confirm_upload(file_id)
        except DomainError as e:
            logger.error(f"Failed to confirm upload for file {file_id}: {e}")
            result.failed.append(file_id)
            return

        if outcome == ConfirmOutcome.CONFIRMED:
            result.confirmed += 1
        elif outcome == ConfirmOutcome.ALREADY_UPLOADED:
            result.already_uploaded += 1
        else:
            result.not_found += 1
