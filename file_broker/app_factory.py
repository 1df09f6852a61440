"""
Application Factory

Creates and configures the Flask application with all dependencies.
Collaborators are wired by explicit constructor passing: metadata store,
URL issuer, then the lifecycle service. Tests inject a ready-made
FileLifecycleService instead.
"""

import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from file_broker.api.v1 import create_api_blueprint
from file_broker.application.event_publisher import EventPublisher
from file_broker.application.file_lifecycle_service import FileLifecycleService
from file_broker.application.storage_event_service import StorageEventService
from file_broker.config.celery_config import make_celery
from file_broker.config.redis_config import (
    RedisConfig,
    get_redis_repository,
    init_redis,
    redis_health_check,
)
from file_broker.config.settings import AppConfig, AuthConfig, FileServiceConfig
from file_broker.domain.events import DomainEvent
from file_broker.infrastructure.event_handlers import LoggingEventHandler
from file_broker.infrastructure.redis_file_record_repository import RedisFileRecordRepository
from file_broker.infrastructure.url_issuer_factory import UrlIssuerFactory

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    auth_config: Optional[AuthConfig] = None,
    file_service: Optional[FileLifecycleService] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        auth_config: Credentials configuration, uses default if None
        file_service: Pre-built lifecycle service; built from Redis and the
            configured storage backend if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    app = Flask(__name__)
    app.auth_config = auth_config if auth_config is not None else AuthConfig()

    CORS(
        app,
        resources={
            r"/*": {
                "origins": config.cors_origins,
                "methods": ["GET", "POST", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization", "X-Internal-Token"],
                "max_age": 3600,
            }
        },
    )

    _initialize_infrastructure(app)
    _initialize_services(app, config, file_service)
    _register_blueprints(app, config)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask) -> None:
    """
    Initialize infrastructure components (Redis, Celery).

    Both clients connect lazily, so this never blocks on the network.

    Args:
        app: Flask application
    """
    try:
        init_redis()
        logger.info("Redis initialized")
    except Exception as e:
        logger.warning(f"Could not initialize Redis: {e}")

    try:
        app.celery = make_celery(app)
        logger.info("Celery initialized")
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")
        app.celery = None


def _create_event_publisher() -> EventPublisher:
    publisher = EventPublisher()
    handler = LoggingEventHandler(logging.getLogger("file_broker.events"))
    publisher.subscribe(DomainEvent, handler.handle)
    return publisher


def _build_file_service(event_publisher: EventPublisher) -> FileLifecycleService:
    """Wire store, issuer and engine from environment configuration."""
    service_config = FileServiceConfig()
    redis_config = RedisConfig()

    file_repository = RedisFileRecordRepository(get_redis_repository(redis_config.key_prefix))
    url_issuer = UrlIssuerFactory.create_issuer()

    return FileLifecycleService(
        file_repository,
        url_issuer,
        upload_max_size=service_config.upload_max_size,
        upload_ttl=service_config.upload_ttl,
        download_ttl=service_config.download_ttl,
        event_publisher=event_publisher,
    )


def _initialize_services(
    app: Flask, config: AppConfig, file_service: Optional[FileLifecycleService]
) -> None:
    """
    Initialize application services and attach them to the app.

    Routes and tasks read ``app.file_service`` and
    ``app.storage_event_service``; when construction fails both stay None
    and the routes answer 503.

    Args:
        app: Flask application
        config: Application configuration
        file_service: Injected lifecycle service, if any
    """
    app.event_publisher = _create_event_publisher()

    if file_service is None:
        try:
            file_service = _build_file_service(app.event_publisher)
        except Exception as e:
            logger.warning(f"Could not initialize file service: {e}")
            file_service = None

    app.file_service = file_service
    app.storage_event_service = None

    if file_service is None:
        return

    dispatcher = None
    if config.storage_events_async:
        if app.celery is not None:
            from file_broker.tasks import enqueue_confirmation

            dispatcher = enqueue_confirmation
            logger.info("Storage notifications are confirmed through Celery")
        else:
            logger.warning("STORAGE_EVENTS_ASYNC set but Celery unavailable; confirming inline")

    app.storage_event_service = StorageEventService(file_service, dispatcher=dispatcher)
    logger.info(
        f"File service initialized with {file_service.url_issuer.backend_name} URL issuer"
    )


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
        config: Application configuration
    """
    app.register_blueprint(create_api_blueprint(config.api_version))

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of all system components.

    Args:
        app: Flask application instance

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "file broker ready",
        "redis": "unknown",
        "storage": "unknown",
        "celery": "unknown",
    }

    try:
        if redis_health_check():
            health_status["redis"] = "connected"
        else:
            health_status["redis"] = "disconnected"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["redis"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    file_service = getattr(app, "file_service", None)
    if file_service is not None:
        health_status["storage"] = file_service.url_issuer.backend_name
    else:
        health_status["storage"] = "unavailable"
        health_status["status"] = "degraded"

    # Celery only matters when confirmations are dispatched through it
    if getattr(app, "celery", None) is not None:
        health_status["celery"] = "available"
    else:
        health_status["celery"] = "unavailable"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health")
    def health():
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
