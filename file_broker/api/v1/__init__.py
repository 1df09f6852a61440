"""
API v1 - File Broker REST API

Versioned endpoints with OpenAPI/Swagger documentation.
"""

from flask import Blueprint
from flask_restx import Api

from file_broker.api.v1.namespaces import files_ns, webhooks_ns

AUTHORIZATIONS = {
    "bearer": {"type": "apiKey", "in": "header", "name": "Authorization"},
    "internal_token": {"type": "apiKey", "in": "header", "name": "X-Internal-Token"},
    "webhook_secret": {"type": "apiKey", "in": "header", "name": "Authorization"},
}


def create_api_blueprint(api_version: str = "v1") -> Blueprint:
    """
    Build the API blueprint with all namespaces attached.

    A new Blueprint and Api are created per call so several applications
    (e.g. in tests) can each register their own.

    Args:
        api_version: Version segment of the URL prefix

    Returns:
        Blueprint mounted at /api/<api_version>
    """
    blueprint = Blueprint(f"api_{api_version}", __name__, url_prefix=f"/api/{api_version}")

    api = Api(
        blueprint,
        version="1.0",
        title="File Broker API",
        description="Signed URL broker for direct-to-storage file uploads and downloads",
        doc="/docs",  # Swagger UI will be available at /api/v1/docs
        authorizations=AUTHORIZATIONS,
    )

    api.add_namespace(files_ns, path="/files")
    api.add_namespace(webhooks_ns, path="/webhooks")

    return blueprint
