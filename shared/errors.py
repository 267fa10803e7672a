"""
Shared error handling for the Users service.
"""

from typing import Any, Dict, List, Optional


class ServiceException(Exception):
    """Base exception for service errors."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        """Convert to error response body."""
        return {"error": self.message}


class ValidationError(ServiceException):
    """Request body failed field validation."""

    status_code = 400

    def __init__(self, errors: List[Dict[str, Any]], message: str = "Validation failed"):
        super().__init__("VALIDATION_ERROR", message, {"errors": errors})
        self.errors = errors

    def to_response(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class StoreError(ServiceException):
    """Backing store errors."""

    def __init__(self, message: str = "Store error", code: str = "STORE_ERROR"):
        super().__init__(code, message)


class StoreUnavailableError(StoreError):
    """Backing store could not be reached at startup."""

    status_code = 503

    def __init__(self, message: str = "Store unavailable"):
        super().__init__(message, "STORE_UNAVAILABLE")


class StoreWriteError(StoreError):
    """Backing store rejected a write, e.g. a duplicate key."""

    status_code = 400

    def __init__(self, message: str = "Store write failed"):
        super().__init__(message, "STORE_WRITE_ERROR")


class StoreReadError(StoreError):
    """Backing store read failed."""

    status_code = 500

    def __init__(self, message: str = "Store read failed"):
        super().__init__(message, "STORE_READ_ERROR")


class CacheError(ServiceException):
    """Cache store errors."""

    def __init__(self, message: str = "Cache error", code: str = "CACHE_ERROR"):
        super().__init__(code, message)


class CacheUnavailableError(CacheError):
    """Cache store could not be reached at startup."""

    status_code = 503

    def __init__(self, message: str = "Cache unavailable"):
        super().__init__(message, "CACHE_UNAVAILABLE")


class CacheReadError(CacheError):
    """Cache lookup failed."""

    status_code = 500

    def __init__(self, message: str = "Cache read failed"):
        super().__init__(message, "CACHE_READ_ERROR")


class CacheWriteError(CacheError):
    """Cache population failed."""

    def __init__(self, message: str = "Cache write failed"):
        super().__init__(message, "CACHE_WRITE_ERROR")
