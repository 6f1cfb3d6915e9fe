"""Exceptions raised by the service layer.

Endpoints translate these into HTTP responses; services never raise
``HTTPException`` themselves.
"""


class BlogError(RuntimeError):
    """Base class for domain errors."""


class NotFoundError(BlogError):
    """Raised when an entity referenced by id does not exist."""


class ValidationError(BlogError):
    """Raised when input is well-formed but not acceptable."""


class PermissionDeniedError(BlogError):
    """Raised when the acting user may not perform the operation."""


class GenerationError(BlogError):
    """Raised when the text-generation service cannot be used or fails."""
