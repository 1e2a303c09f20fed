"""Errors raised by the catalog, section and file services.

They are ``HTTPException`` subclasses so that they travel untouched through
the endpoints and are rendered by the global handlers in
``app.middleware.exceptions``.
"""
from typing import Optional

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Entity is absent or outside the caller's scope."""

    def __init__(self, detail: str = "Resource not found."):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    """Ownership check failed on a mutating operation."""

    def __init__(self, detail: str = "You do not have permission to perform this action."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidOperationError(HTTPException):
    """Structurally invalid request: cycle-creating move, cascade-required delete, bad pagination."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BlobStorageError(Exception):
    """Raised by blob storage adapters when the backing store fails."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
