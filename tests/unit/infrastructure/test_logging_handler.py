"""Unit tests for LoggingEventHandler."""

from datetime import datetime
from unittest.mock import Mock

from file_broker.domain.events import (
    DownloadAccessDeniedEvent,
    FileDeletedEvent,
    FileRegisteredEvent,
)
from file_broker.infrastructure.event_handlers import LoggingEventHandler


def test_registered_event_logged_at_info():
    logger = Mock()
    LoggingEventHandler(logger).handle(FileRegisteredEvent(
        aggregate_id="f1", occurred_at=datetime.utcnow(),
        owner_id="u1", content_type="application/pdf", size=10,
    ))

    message = logger.info.call_args.args[0]
    assert "f1" in message and "u1" in message


def test_denied_download_logged_as_warning():
    logger = Mock()
    LoggingEventHandler(logger).handle(DownloadAccessDeniedEvent(
        aggregate_id="f1", occurred_at=datetime.utcnow(), requester_id="",
    ))

    assert "<anonymous>" in logger.warning.call_args.args[0]


def test_logger_failures_are_contained():
    logger = Mock()
    logger.info.side_effect = RuntimeError("handler broke")

    LoggingEventHandler(logger).handle(FileDeletedEvent(aggregate_id="f1", occurred_at=datetime.utcnow()))

    logger.error.assert_called_once()
