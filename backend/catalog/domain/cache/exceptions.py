"""
Cache Domain Exceptions

Errors raised by ``CacheRepository`` adapters. The cache-aside layer absorbs
all of them: a cache problem is never a request failure.
"""

from typing import Optional, Any, Dict

from ..exceptions import CatalogException, ErrorKind


class CacheFailure(CatalogException):
    """Base exception for cache-layer problems (connectivity, protocol, etc.)."""

    kind = ErrorKind.CACHE_FAILURE
    default_error_code = "CACHE_FAILURE"

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
        error_code: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if key:
            details["key"] = key
        if operation:
            details["operation"] = operation
        super().__init__(
            message=message, error_code=error_code, details=details, cause=cause
        )
        self.key = key
        self.operation = operation


class CacheDeserializationError(CacheFailure):
    """Raised when a stored payload cannot be decoded.

    A corrupt entry is a hard error, not a miss.
    """

    default_error_code = "CACHE_DESERIALIZATION_ERROR"

    def __init__(self, key: str, cause: Optional[BaseException] = None):
        super().__init__(
            message=f"Corrupt cache payload for key: {key}",
            key=key,
            operation="get",
            cause=cause,
        )


class CacheTimeoutError(CacheFailure):
    """Raised when a cache operation exceeds its deadline."""

    default_error_code = "CACHE_TIMEOUT"

    def __init__(self, operation: str, timeout_seconds: float, key: Optional[str] = None):
        super().__init__(
            message=f"Cache operation '{operation}' timed out after {timeout_seconds}s",
            key=key,
            operation=operation,
        )
        self.timeout_seconds = timeout_seconds
        self.details["timeout_seconds"] = timeout_seconds
