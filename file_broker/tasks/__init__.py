"""Celery background tasks."""

from file_broker.tasks.confirm_upload_task import confirm_upload, enqueue_confirmation

__all__ = ["confirm_upload", "enqueue_confirmation"]
