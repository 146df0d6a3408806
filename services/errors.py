"""
services.errors - Exceptions raised by the record services.

Routes translate these into HTTP status codes.
"""


class ServiceError(Exception):
    pass


class NotFoundError(ServiceError):
    """Record does not exist or belongs to another owner."""
    pass


class ConflictError(ServiceError):
    """Write would violate a per-owner uniqueness rule."""
    pass


class ValidationError(ServiceError):
    """Payload is missing a field or carries an invalid value."""
    pass
