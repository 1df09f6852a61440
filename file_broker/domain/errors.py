"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions bridge them to user-facing messages and HTTP responses.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    INVALID_REQUEST = "invalid_request"
    FILE_ID_REQUIRED = "file_id_required"
    FILE_NOT_FOUND = "file_not_found"
    ACCESS_DENIED = "access_denied"
    UNAUTHORIZED = "unauthorized"
    SERVICE_UNAVAILABLE = "service_unavailable"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.FILE_ID_REQUIRED: {
        "title": "File ID Required",
        "message": "A file identifier is required for this operation.",
        "action": "Provide the file_id returned when the upload was requested.",
    },
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "The requested file could not be found or has been deleted.",
        "action": "Check the file identifier or upload the file again.",
    },
    ErrorCategory.ACCESS_DENIED: {
        "title": "Access Denied",
        "message": "You do not have permission to access this file.",
        "action": "Ask the file owner to share it with you.",
    },
    ErrorCategory.UNAUTHORIZED: {
        "title": "Authentication Required",
        "message": "Valid credentials are required to access this resource.",
        "action": "Sign in again and retry the request.",
    },
    ErrorCategory.SERVICE_UNAVAILABLE: {
        "title": "Service Unavailable",
        "message": "The file service is not ready to handle requests.",
        "action": "Please try again in a few moments.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class InvalidInputError(DomainError):
    """
    Raised when caller input is malformed or outside policy.

    Covers empty required fields, non-positive sizes and sizes above the
    configured maximum. Never retried; the caller must fix the request.
    """
    pass


class FileIDRequiredError(InvalidInputError):
    """Raised when an operation needs a file identifier and none was given."""

    def __init__(self, message: str = "file id is required", original_error: Exception = None):
        super().__init__(message, original_error)


class FileRecordNotFoundError(DomainError):
    """
    Raised when a file record does not exist or is soft-deleted.

    Metadata stores raise this from lookups, updates and soft deletes.
    """

    def __init__(self, file_id: str = "", original_error: Exception = None):
        message = f"File not found: {file_id}" if file_id else "File not found"
        super().__init__(message, original_error)
        self.file_id = file_id


class FileRecordStatusConflictError(DomainError):
    """
    Raised by a conditional update when the stored status is not the
    expected one, so another writer already moved the record on.
    """

    def __init__(self, file_id: str = "", original_error: Exception = None):
        super().__init__(f"File status changed concurrently: {file_id}", original_error)
        self.file_id = file_id


class AccessDeniedError(DomainError):
    """Raised when the requester fails the file access rule."""

    def __init__(self, message: str = "access denied", original_error: Exception = None):
        super().__init__(message, original_error)


class InternalError(DomainError):
    """
    Raised when a collaborator (metadata store or URL issuer) fails.

    The original collaborator exception is kept in ``original_error`` for
    diagnostics; transport layers only surface a generic server error.
    """
    pass


# ============================================================================
# Application Layer Exceptions (Can have infrastructure concerns)
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    This is an application-layer concern that bridges domain errors
    with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


class AuthenticationError(ApplicationError):
    """Raised by transport adapters when credentials are missing or invalid."""

    def __init__(
        self,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(ErrorCategory.UNAUTHORIZED, technical_message, context)
        self.http_status_code = 401


# Order matters: FileIDRequiredError must be matched before InvalidInputError.
_CATEGORY_BY_ERROR = (
    (FileIDRequiredError, ErrorCategory.FILE_ID_REQUIRED, 400),
    (InvalidInputError, ErrorCategory.INVALID_REQUEST, 400),
    (FileRecordNotFoundError, ErrorCategory.FILE_NOT_FOUND, 404),
    (AccessDeniedError, ErrorCategory.ACCESS_DENIED, 403),
    (InternalError, ErrorCategory.SYSTEM_ERROR, 500),
)


def error_category_for(error: Exception) -> ErrorCategory:
    """Map an exception to its error category (SYSTEM_ERROR if unknown)."""
    for error_type, category, _ in _CATEGORY_BY_ERROR:
        if isinstance(error, error_type):
            return category
    return ErrorCategory.SYSTEM_ERROR


def http_status_for(error: Exception) -> int:
    """Map an exception to an HTTP status code (500 if unknown)."""
    for error_type, _, status_code in _CATEGORY_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Note: Logging should be handled by the caller, not by this function.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code
