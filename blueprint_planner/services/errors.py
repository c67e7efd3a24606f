"""
Exceptions raised by page-level blueprint operations.
"""


class BlueprintError(Exception):
    """Raised when a blueprint operation cannot be performed."""
    pass


class PermissionDeniedError(BlueprintError):
    """Raised when the current viewer's role does not allow an operation."""
    pass


__all__ = ['BlueprintError', 'PermissionDeniedError']
