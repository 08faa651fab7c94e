# snapshare/core/exceptions.py
"""
Exception types raised by the service layer.

Every error carries an HTTP status and an error code so that the handlers
registered in create_app() can answer with a terse JSON body without
leaking internals.
"""
from typing import Optional


class SnapShareError(Exception):
    """Base class for all expected application errors."""
    status_code = 500
    error_code = 'INTERNAL_SERVER_ERROR'

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {'error_code': self.error_code, 'message': self.message}
        if self.details:
            result['details'] = self.details
        return result


class InvalidInputError(SnapShareError):
    """Malformed or missing input. The operation is not attempted."""
    status_code = 400
    error_code = 'VALIDATION_ERROR'

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message, details={'field': field} if field else None)


class AuthError(SnapShareError):
    """Missing, expired or tampered session token."""
    status_code = 401
    error_code = 'UNAUTHORIZED'


class AuthorizationError(SnapShareError):
    """The caller is not the owner of the resource it tries to change."""
    status_code = 403
    error_code = 'FORBIDDEN'


class NotFoundError(SnapShareError):
    status_code = 404
    error_code = 'NOT_FOUND'

    def __init__(self, entity_type: str, entity_id: Optional[str] = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.capitalize()} not found",
                         error_code=f"{entity_type.upper()}_NOT_FOUND")


class ConflictError(SnapShareError):
    """A uniqueness constraint rejected the write."""
    status_code = 409
    error_code = 'CONFLICT'


class ObjectStoreError(SnapShareError):
    """Upload to or deletion from the image bucket failed."""
    status_code = 502
    error_code = 'STORAGE_ERROR'
