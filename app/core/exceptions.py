"""
Application exceptions.
Each carries the HTTP status it maps to; main.py renders them as {"error": message}.
"""


class AppError(Exception):
    """Base for errors surfaced at the request boundary."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


# --- 401

class Unauthorized(AppError):
    status_code = 401
    message = "Unauthorized"


class IdentityUnavailable(Unauthorized):
    """No externally-authenticated identity on the request."""
    message = "Unauthorized"


class InvalidSignature(Unauthorized):
    message = "Invalid webhook signature"


# --- 400

class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class MissingPrimaryEmail(ValidationError):
    """Identity provider returned an identity without a usable email."""
    message = "No primary email found"


class MalformedPayload(ValidationError):
    message = "Malformed payload"


# --- 404

class NotFound(AppError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class NotFoundOrForbidden(AppError):
    """Missing row and ownership mismatch are reported identically."""
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found or unauthorized")


# --- 500

class QueryError(AppError):
    """Wraps an error raised by the relational store."""
    status_code = 500
    message = "Database error"

    def __init__(self, message: str = None, orig: Exception = None):
        super().__init__(message)
        self.orig = orig


class SchemaVerificationFailed(AppError):
    status_code = 500
    message = "Database schema verification failed"


class ProviderUnavailable(AppError):
    """Identity provider is not configured or did not answer."""
    status_code = 500
    message = "Identity provider unavailable"
