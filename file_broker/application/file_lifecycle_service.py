"""
File Lifecycle Application Service

Single authority over file record state transitions and the only place
the download access rule is enforced.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from file_broker.application.event_publisher import EventPublisher
from file_broker.domain.errors import (
    AccessDeniedError,
    FileIDRequiredError,
    FileRecordNotFoundError,
    FileRecordStatusConflictError,
    InternalError,
    InvalidInputError,
)
from file_broker.domain.events import (
    DomainEvent,
    DownloadAccessDeniedEvent,
    FileDeletedEvent,
    FileRegisteredEvent,
    FileUploadConfirmedEvent,
    UploadConfirmationSkippedEvent,
)
from file_broker.domain.file_storage import (
    ConfirmOutcome,
    DownloadLink,
    FileRecord,
    FileRecordRepository,
    FileStatus,
    Identity,
    IUrlIssuer,
    UploadSlot,
    can_read,
)

logger = logging.getLogger(__name__)


class FileLifecycleService:
    """
    Application service for the file lifecycle.

    Orchestrates validation, record creation, signed URL issuance, ownership
    checks and status transitions:

        (none) --begin_upload--> pending --confirm_upload--> uploaded
        {pending, uploaded} --delete_file--> deleted (terminal)

    Holds no mutable state of its own; all durable state lives in the
    metadata store, so instances are safe to share between threads.
    """

    def __init__(
        self,
        file_repository: FileRecordRepository,
        url_issuer: IUrlIssuer,
        upload_max_size: int,
        upload_ttl: timedelta,
        download_ttl: timedelta,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Initialize FileLifecycleService.

        Args:
            file_repository: Metadata store for file records
            url_issuer: Signed URL issuer for the object store
            upload_max_size: Largest accepted declared size in bytes
            upload_ttl: Lifetime of upload URLs
            download_ttl: Lifetime of download URLs
            event_publisher: Optional publisher for domain events
        """
        self.file_repo = file_repository
        self.url_issuer = url_issuer
        self.upload_max_size = upload_max_size
        self.upload_ttl = upload_ttl
        self.download_ttl = download_ttl
        self.event_publisher = event_publisher

    def begin_upload(self, owner_id: str, content_type: str, declared_size: int) -> UploadSlot:
        """
        Reserve an upload slot and return a signed PUT URL.

        Args:
            owner_id: User requesting the upload
            content_type: Declared MIME type
            declared_size: Declared size in bytes

        Returns:
            UploadSlot with the new file id and upload URL

        Raises:
            InvalidInputError: If any input is empty or the size is out of range
            InternalError: If the record cannot be stored or the URL cannot be signed
        """
        self._validate_upload_request(owner_id, content_type, declared_size)

        record = FileRecord.create(owner_id, content_type, declared_size)

        try:
            created = self.file_repo.create(record)
        except Exception as e:
            raise InternalError(
                f"failed to create file record: {e}", original_error=e
            ) from e

        try:
            upload_url = self.url_issuer.issue_upload_url(
                created.storage_path,
                created.content_type,
                self.upload_max_size,
                self.upload_ttl,
            )
        except Exception as e:
            raise InternalError(
                f"failed to generate upload URL: {e}", original_error=e
            ) from e

        logger.info(f"Registered file {created.id} for owner {owner_id}")
        self._publish(FileRegisteredEvent(
            aggregate_id=created.id,
            occurred_at=datetime.utcnow(),
            owner_id=created.owner_id,
            content_type=created.content_type,
            size=created.size,
        ))

        return UploadSlot(file_id=created.id, upload_url=upload_url)

    def confirm_upload(self, file_id: str) -> ConfirmOutcome:
        """
        Mark a pending file as uploaded.

        Driven by object-store notifications, which may be duplicated,
        reordered or refer to files that were deleted or never tracked.
        Those cases succeed without changing anything.

        Args:
            file_id: File identifier taken from the object key

        Returns:
            ConfirmOutcome describing what happened

        Raises:
            FileIDRequiredError: If file_id is empty
            InternalError: If the store fails
        """
        if not file_id:
            raise FileIDRequiredError()

        try:
            record = self.file_repo.get_by_id(file_id)
        except FileRecordNotFoundError:
            return self._skip_confirmation(file_id, ConfirmOutcome.NOT_FOUND)
        except Exception as e:
            raise InternalError(
                f"failed to get file: {e}", original_error=e
            ) from e

        if record.is_uploaded():
            return self._skip_confirmation(file_id, ConfirmOutcome.ALREADY_UPLOADED)

        record.mark_as_uploaded()

        try:
            self.file_repo.update(record, expected_status=FileStatus.PENDING)
        except FileRecordNotFoundError:
            # Deleted between the read and the write
            return self._skip_confirmation(file_id, ConfirmOutcome.NOT_FOUND)
        except FileRecordStatusConflictError:
            # A concurrent confirmation won the race
            return self._skip_confirmation(file_id, ConfirmOutcome.ALREADY_UPLOADED)
        except Exception as e:
            raise InternalError(
                f"failed to update file status: {e}", original_error=e
            ) from e

        logger.info(f"Confirmed upload of file {file_id}")
        self._publish(FileUploadConfirmedEvent(
            aggregate_id=file_id,
            occurred_at=datetime.utcnow(),
            owner_id=record.owner_id,
        ))
        return ConfirmOutcome.CONFIRMED

    def get_download_url(self, file_id: str, identity: Optional[Identity]) -> DownloadLink:
        """
        Authorize the requester and return a signed GET URL.

        Args:
            file_id: File identifier
            identity: Authenticated requester, or None

        Returns:
            DownloadLink with the signed URL

        Raises:
            FileIDRequiredError: If file_id is empty
            FileRecordNotFoundError: If the file is missing or deleted
            AccessDeniedError: If the requester is neither owner nor holder of
                the file's read scope
            InternalError: If the store or issuer fails
        """
        if not file_id:
            raise FileIDRequiredError()

        try:
            record = self.file_repo.get_by_id(file_id)
        except FileRecordNotFoundError:
            raise
        except Exception as e:
            raise InternalError(
                f"failed to get file: {e}", original_error=e
            ) from e

        if not can_read(record, identity):
            requester_id = identity.user_id if identity else ""
            logger.warning(f"Download of file {file_id} denied for user '{requester_id}'")
            self._publish(DownloadAccessDeniedEvent(
                aggregate_id=file_id,
                occurred_at=datetime.utcnow(),
                requester_id=requester_id,
            ))
            raise AccessDeniedError()

        try:
            download_url = self.url_issuer.issue_download_url(
                record.storage_path, self.download_ttl
            )
        except Exception as e:
            raise InternalError(
                f"failed to generate download URL: {e}", original_error=e
            ) from e

        return DownloadLink(download_url=download_url)

    def delete_file(self, file_id: str) -> None:
        """
        Soft-delete a file record.

        No ownership check happens here; callers reach this only through the
        internal (service-to-service) transport.

        Args:
            file_id: File identifier

        Raises:
            FileIDRequiredError: If file_id is empty
            FileRecordNotFoundError: If the file is missing or already deleted
            InternalError: If the store fails
        """
        if not file_id:
            raise FileIDRequiredError()

        try:
            self.file_repo.soft_delete(file_id)
        except FileRecordNotFoundError:
            raise
        except Exception as e:
            raise InternalError(
                f"failed to delete file: {e}", original_error=e
            ) from e

        logger.info(f"Deleted file {file_id}")
        self._publish(FileDeletedEvent(
            aggregate_id=file_id,
            occurred_at=datetime.utcnow(),
        ))

    def _validate_upload_request(self, owner_id: str, content_type: str, declared_size: int) -> None:
        if not owner_id:
            raise InvalidInputError("invalid input data: owner ID is required")
        if not content_type:
            raise InvalidInputError("invalid input data: content type is required")
        if declared_size is None or declared_size <= 0:
            raise InvalidInputError("invalid input data: file size must be positive")
        if declared_size > self.upload_max_size:
            raise InvalidInputError(
                "invalid input data: file size exceeds maximum allowed size "
                f"({self.upload_max_size} bytes)"
            )

    def _skip_confirmation(self, file_id: str, outcome: ConfirmOutcome) -> ConfirmOutcome:
        if outcome == ConfirmOutcome.NOT_FOUND:
            logger.info(f"Ignoring upload confirmation for unknown or deleted file {file_id}")
        else:
            logger.debug(f"File {file_id} already uploaded, confirmation ignored")

        self._publish(UploadConfirmationSkippedEvent(
            aggregate_id=file_id,
            occurred_at=datetime.utcnow(),
            reason=outcome.value,
        ))
        return outcome

    def _publish(self, event: DomainEvent) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
