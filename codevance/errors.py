import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)

class AppError(Exception):
    """Base exception class for application-specific errors."""

    def __init__(self, message=None, details=None, status_code=None):
        super().__init__(message)
        self.message = message or "An unexpected error occurred"
        self.details = details
        self.status_code = status_code or 500

    def to_dict(self):
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

class AuthException(AppError):
    """Exception for authentication errors."""

    def __init__(self, message=None, details=None):
        super().__init__(
            message=message or "Authentication error",
            details=details,
            status_code=401
        )

class ValidationError(AppError):
    """Exception for data validation errors."""

    def __init__(self, message=None, details=None):
        super().__init__(
            message=message or "Validation error",
            details=details,
            status_code=400
        )

class ResourceNotFoundError(AppError):
    """Exception for requests to non-existent resources."""

    def __init__(self, message=None, details=None):
        super().__init__(
            message=message or "Resource not found",
            details=details,
            status_code=404
        )

class ForbiddenError(AppError):
    """Exception for unauthorized access to resources."""

    def __init__(self, message=None, details=None):
        super().__init__(
            message=message or "Access forbidden",
            details=details,
            status_code=403
        )

class ConflictError(AppError):
    """Exception for requests that clash with existing data."""

    def __init__(self, message=None, details=None):
        super().__init__(
            message=message or "Resource already exists",
            details=details,
            status_code=409
        )

class SyncError(AppError):
    """Fatal, non-retryable problem while syncing a linked account."""

    def __init__(self, message=None, details=None):
        super().__init__(
            message=message or "Sync failed",
            details=details,
            status_code=500
        )

def register_error_handlers(app):
    """Register application error handlers."""

    @app.errorhandler(AppError)
    def handle_app_error(e):
        """Handle application specific errors."""
        if e.status_code >= 500:
            log.error(f"Application error: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle Werkzeug HTTP exceptions."""
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(500)
    def internal_server_error(e):
        """Handle 500 errors."""
        log.exception("Unhandled server error")
        return jsonify({"error": "Internal server error"}), 500
