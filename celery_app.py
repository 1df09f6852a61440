"""
Celery Application Instance

Creates the Celery app instance for use by workers.
Uses the app factory so tasks see the same services as the API.

    celery -A celery_app worker -Q storage_events_queue,default
"""

from file_broker.app_factory import create_app

flask_app = create_app()

celery_app = flask_app.celery

# Task modules are imported by name when the worker starts
celery_app.conf.imports = ("file_broker.tasks.confirm_upload_task",)
