"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app, redirect, request
from flask_restx import Namespace, Resource

from file_broker.api.auth import (
    authenticate_request,
    require_internal_token,
    require_webhook_secret,
    unauthorized_response,
)
from file_broker.api.v1.models import (
    download_url_response,
    error_response,
    register_models,
    storage_event_response,
    upload_request,
    upload_response,
)
from file_broker.domain.errors import (
    AuthenticationError,
    DomainError,
    ErrorCategory,
    create_error_response,
    error_category_for,
    http_status_for,
)


def _service_unavailable(name: str):
    current_app.logger.error(f"{name} not initialized")
    return create_error_response(
        ErrorCategory.SERVICE_UNAVAILABLE, f"{name} not initialized", status_code=503
    )


def _domain_error_response(error: DomainError, operation: str):
    status_code = http_status_for(error)
    if status_code >= 500:
        cause = error.original_error or error
        current_app.logger.error(f"{operation} failed: {error} ({cause})")
    else:
        current_app.logger.info(f"{operation} rejected: {error}")
    return create_error_response(error_category_for(error), str(error), status_code=status_code)


def _resolve_download(file_id: str):
    """Authenticate the caller and fetch a download link, or build an error response."""
    try:
        identity = authenticate_request()
    except AuthenticationError as e:
        return None, unauthorized_response(e)

    if identity is None:
        return None, create_error_response(
            ErrorCategory.UNAUTHORIZED, "Missing bearer token", status_code=401
        )

    file_service = getattr(current_app, "file_service", None)
    if file_service is None:
        return None, _service_unavailable("File service")

    try:
        return file_service.get_download_url(file_id, identity), None
    except DomainError as e:
        return None, _domain_error_response(e, f"Download of file {file_id}")


# =============================================================================
# Files Namespace - Upload, download and delete
# =============================================================================

files_ns = Namespace("files", description="File upload and download operations")
register_models(files_ns, upload_request, upload_response, download_url_response, error_response)


@files_ns.route("/uploads")
class FileUploads(Resource):
    """Reserve upload slots"""

    @files_ns.doc("begin_upload", security="internal_token")
    @files_ns.expect(upload_request)
    @files_ns.response(201, "Upload slot created", upload_response)
    @files_ns.response(400, "Bad Request", error_response)
    @files_ns.response(401, "Unauthorized", error_response)
    @files_ns.response(500, "Internal Server Error", error_response)
    @require_internal_token
    def post(self):
        """
        Register a new file and get a signed upload URL

        The caller PUTs the file body directly to upload_url. The file stays
        pending until the object store reports the object as created.
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return create_error_response(
                ErrorCategory.INVALID_REQUEST, "Request body must be a JSON object", status_code=400
            )

        size = data.get("size")
        if isinstance(size, bool) or not isinstance(size, int):
            return create_error_response(
                ErrorCategory.INVALID_REQUEST, "'size' must be an integer", status_code=400
            )

        file_service = getattr(current_app, "file_service", None)
        if file_service is None:
            return _service_unavailable("File service")

        try:
            slot = file_service.begin_upload(
                data.get("owner_id") or "", data.get("content_type") or "", size
            )
        except DomainError as e:
            return _domain_error_response(e, "Upload registration")

        current_app.logger.info(f"[API_V1] Upload slot created for file {slot.file_id}")
        return slot.to_dict(), 201


@files_ns.route("/<string:file_id>")
@files_ns.param("file_id", "The file identifier")
class File(Resource):
    """File record operations"""

    @files_ns.doc("delete_file", security="internal_token")
    @files_ns.response(204, "File deleted")
    @files_ns.response(401, "Unauthorized", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    @files_ns.response(500, "Internal Server Error", error_response)
    @require_internal_token
    def delete(self, file_id):
        """
        Soft-delete a file record

        The record stays stored for audit but every later lookup, download
        or confirmation treats it as not found.
        """
        file_service = getattr(current_app, "file_service", None)
        if file_service is None:
            return _service_unavailable("File service")

        try:
            file_service.delete_file(file_id)
        except DomainError as e:
            return _domain_error_response(e, f"Delete of file {file_id}")

        return "", 204


@files_ns.route("/<string:file_id>/download")
@files_ns.param("file_id", "The file identifier")
class FileDownload(Resource):
    """Redirect to the file"""

    @files_ns.doc("download_file", security="bearer")
    @files_ns.response(302, "Redirect to the signed download URL")
    @files_ns.response(401, "Unauthorized", error_response)
    @files_ns.response(403, "Access Denied", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    def get(self, file_id):
        """
        Download a file

        Redirects to a short-lived signed URL. Allowed for the owner or for
        tokens carrying the file:{file_id}:read scope.
        """
        link, error = _resolve_download(file_id)
        if error is not None:
            return error
        return redirect(link.download_url, code=302)


@files_ns.route("/<string:file_id>/download-url")
@files_ns.param("file_id", "The file identifier")
class FileDownloadUrl(Resource):
    """Signed download URL"""

    @files_ns.doc("get_download_url", security="bearer")
    @files_ns.response(200, "Success", download_url_response)
    @files_ns.response(401, "Unauthorized", error_response)
    @files_ns.response(403, "Access Denied", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    def get(self, file_id):
        """
        Get a signed download URL for a file

        Same access rule as the redirect endpoint, for clients that want the
        URL itself.
        """
        link, error = _resolve_download(file_id)
        if error is not None:
            return error
        return link.to_dict(), 200


# =============================================================================
# Webhooks Namespace - Object store notifications
# =============================================================================

webhooks_ns = Namespace("webhooks", description="Object store notifications")
register_models(webhooks_ns, storage_event_response, error_response)


@webhooks_ns.route("/storage")
class StorageWebhook(Resource):
    """Object-created notifications"""

    @webhooks_ns.doc("storage_notification", security="webhook_secret")
    @webhooks_ns.response(200, "Notification processed", storage_event_response)
    @webhooks_ns.response(401, "Unauthorized", error_response)
    @webhooks_ns.response(503, "Service Unavailable", error_response)
    @require_webhook_secret
    def post(self):
        """
        Receive an object store notification

        Accepts S3/MinIO bucket notifications and GCS Pub/Sub push messages.
        Each created object moves its file from pending to uploaded.
        Always answers 200 once processed so the store does not redeliver.
        """
        storage_event_service = getattr(current_app, "storage_event_service", None)
        if storage_event_service is None:
            return _service_unavailable("Storage event service")

        payload = request.get_json(silent=True)
        if payload is None:
            current_app.logger.warning("Ignoring storage notification with undecodable body")

        result = storage_event_service.handle_notification(payload)
        if result.received:
            current_app.logger.info(
                f"[API_V1] Storage notification: {result.received} objects, "
                f"{result.confirmed} confirmed, {result.queued} queued, "
                f"{len(result.failed)} failed"
            )
        return result.to_dict(), 200
