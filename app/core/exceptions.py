"""
Custom exceptions for the shortlink favorites service.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Request errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Link errors
    LINK_NOT_FOUND = "LINK_NOT_FOUND"

    # Store errors
    STORE_NOT_CONFIGURED = "STORE_NOT_CONFIGURED"
    STORE_FAILURE = "STORE_FAILURE"

    # Generic errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class KVStoreError(Exception):
    """Raised by a key-value store backend when an operation fails."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class ShortlinkException(Exception):
    """Base exception for the shortlink favorites service."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class StoreNotConfiguredError(ShortlinkException):
    """Raised when no key-value store binding is available."""

    def __init__(self, message: str = "Key-value store binding is not configured"):
        super().__init__(
            message=message,
            error_code=ErrorCode.STORE_NOT_CONFIGURED,
            status_code=500
        )


class LinkNotFoundError(ShortlinkException):
    """Raised when a referenced link record does not exist."""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Link '{slug}' not found, cannot update its favorite state",
            error_code=ErrorCode.LINK_NOT_FOUND,
            details={"slug": slug},
            status_code=404
        )


class FavoriteUpdateError(ShortlinkException):
    """Raised when toggling a favorite fails on a store operation."""

    def __init__(self, slug: str, reason: Optional[str] = None):
        super().__init__(
            message=reason or "Failed to update favorite state",
            error_code=ErrorCode.STORE_FAILURE,
            details={"slug": slug},
            status_code=500
        )


class FavoriteListError(ShortlinkException):
    """Raised when the favorites list cannot be read or hydrated."""

    def __init__(self, reason: Optional[str] = None, slug: Optional[str] = None):
        super().__init__(
            message=reason or "Failed to list favorite links",
            error_code=ErrorCode.STORE_FAILURE,
            details={"slug": slug} if slug else None,
            status_code=500
        )
