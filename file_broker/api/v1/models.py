"""
API Models for request/response documentation

Models are standalone and registered on each namespace that uses them, so
the namespaces can be attached to any Api instance.
"""

from flask_restx import Model, fields

# =============================================================================
# Request Models
# =============================================================================

upload_request = Model(
    "UploadRequest",
    {
        "owner_id": fields.String(
            required=True, description="User that will own the file", example="u1"
        ),
        "content_type": fields.String(
            required=True, description="MIME type of the file", example="application/pdf"
        ),
        "size": fields.Integer(
            required=True, description="Declared file size in bytes", example=1048576, min=1
        ),
    },
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = Model(
    "UploadResponse",
    {
        "file_id": fields.String(description="Identifier of the new file"),
        "upload_url": fields.String(description="Signed PUT URL for the file body"),
    },
)

download_url_response = Model(
    "DownloadUrlResponse",
    {
        "download_url": fields.String(description="Signed GET URL for the file"),
    },
)

storage_event_response = Model(
    "StorageEventResponse",
    {
        "received": fields.Integer(description="File objects found in the notification"),
        "confirmed": fields.Integer(description="Files moved to uploaded"),
        "already_uploaded": fields.Integer(description="Files that were already uploaded"),
        "not_found": fields.Integer(description="Objects with no live file record"),
        "queued": fields.Integer(description="Files handed to background confirmation"),
        "failed": fields.List(fields.String, description="File ids whose confirmation failed"),
    },
)

error_response = Model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category", example="file_not_found"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-facing explanation"),
        "action": fields.String(description="Suggested next step"),
    },
)


def register_models(namespace, *models):
    """Register models on a namespace for Swagger output."""
    for model in models:
        namespace.add_model(model.name, model)
