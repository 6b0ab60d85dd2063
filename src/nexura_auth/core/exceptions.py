"""Error taxonomy for the authentication service.

Every error carries an HTTP status and a fixed public message. The message
handed to clients never varies with the underlying cause; detailed causes
belong in server-side logs only.
"""

from __future__ import annotations


class AuthServiceError(Exception):
    """Base class for errors surfaced through the API."""

    status_code: int = 500
    public_detail: str = "Internal server error"


class InputValidationError(AuthServiceError):
    """Malformed address, signature or message shape."""

    status_code = 400
    public_detail = "Invalid request"


class AuthenticationError(AuthServiceError):
    """Signature, challenge or session did not prove the claimed identity."""

    status_code = 401
    public_detail = "Authentication failed"


class ConflictError(AuthServiceError):
    """The challenge was already consumed or no pending challenge matches."""

    status_code = 409
    public_detail = "Challenge is no longer valid"


class StorageUnavailableError(AuthServiceError):
    """The backing store could not be reached; the caller may retry."""

    status_code = 503
    public_detail = "Service temporarily unavailable"
