"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from file_broker.domain.events import (
    DomainEvent,
    DownloadAccessDeniedEvent,
    FileDeletedEvent,
    FileRegisteredEvent,
    FileUploadConfirmedEvent,
    UploadConfirmationSkippedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.

    Only identifiers and sizes are logged; signed URLs never reach events.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, FileRegisteredEvent):
                self.logger.info(
                    f"File registered: file_id={event.aggregate_id}, "
                    f"owner_id={event.owner_id}, content_type={event.content_type}, "
                    f"size={event.size} bytes"
                )
            elif isinstance(event, FileUploadConfirmedEvent):
                self.logger.info(
                    f"Upload confirmed: file_id={event.aggregate_id}, owner_id={event.owner_id}"
                )
            elif isinstance(event, UploadConfirmationSkippedEvent):
                self.logger.info(
                    f"Upload confirmation skipped: file_id={event.aggregate_id}, "
                    f"reason={event.reason}"
                )
            elif isinstance(event, FileDeletedEvent):
                self.logger.info(f"File deleted: file_id={event.aggregate_id}")
            elif isinstance(event, DownloadAccessDeniedEvent):
                self.logger.warning(
                    f"Download denied: file_id={event.aggregate_id}, "
                    f"requester_id={event.requester_id or '<anonymous>'}"
                )
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )
