"""
Upload Confirmation Task

Celery task that confirms an upload out of band.
Thin wrapper that delegates to FileLifecycleService.
"""

import logging
import time
from typing import Any, Dict

from celery import shared_task
from flask import current_app

from file_broker.domain.errors import InternalError

logger = logging.getLogger(__name__)

MAX_RETRIES = 5


@shared_task(bind=True, name="tasks.confirm_upload", max_retries=MAX_RETRIES)
def confirm_upload(self, file_id: str) -> Dict[str, Any]:
    """
    Confirm that the object for a file has landed in storage.

    Runs inside the Flask app context (see make_celery). Store or issuer
    failures are retried with exponential backoff; an unknown or deleted
    file is a normal outcome and is not retried.

    Args:
        file_id: File identifier taken from the object key

    Returns:
        dict: file_id and the confirmation outcome
    """
    start_time = time.time()
    logger.info(f"Confirmation task started for file {file_id}")

    file_service = getattr(current_app, "file_service", None)
    if file_service is None:
        raise RuntimeError("File service not initialized")

    try:
        outcome = file_service.confirm_upload(file_id)
    except InternalError as e:
        countdown = 2 ** self.request.retries
        logger.warning(
            f"Confirmation for file {file_id} failed "
            f"(attempt {self.request.retries + 1}/{MAX_RETRIES + 1}), retrying in {countdown}s: {e}"
        )
        raise self.retry(exc=e, countdown=countdown)

    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"Confirmation task for file {file_id} finished in {duration_ms:.2f}ms: {outcome.value}")

    return {"file_id": file_id, "outcome": outcome.value}


def enqueue_confirmation(file_id: str) -> None:
    """Dispatcher for StorageEventService: queue one confirmation."""
    confirm_upload.delay(file_id)
