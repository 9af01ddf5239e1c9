"""
Product Domain Exceptions

Two vocabularies live here:

- Store errors (``StoreError``, ``StoreTimeoutError``) are raised by
  ``ProductRepository`` adapters for infrastructure problems. They never
  travel above the product service.
- Domain outcomes (``ProductValidationError``, ``ProductNotFound``,
  ``RepositoryFailure``, ``RepositoryTimeout``) are what the service raises to
  its callers.
"""

from typing import Optional, Any, Dict
from uuid import UUID

from ..exceptions import CatalogException, ErrorKind


class StoreError(Exception):
    """Raised by a persistent store adapter on connectivity or constraint failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.operation = operation
        self.cause = cause
        super().__init__(message)


class StoreTimeoutError(StoreError):
    """Raised when a store operation exceeds its deadline."""

    def __init__(self, operation: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Store operation '{operation}' timed out after {timeout_seconds}s",
            operation=operation,
        )


class ProductValidationError(CatalogException):
    """Raised when product input is malformed. Never reaches the store."""

    kind = ErrorKind.VALIDATION
    default_error_code = "PRODUCT_VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
            details["value"] = value
        super().__init__(message=message, details=details)
        self.field = field


class ProductNotFound(CatalogException):
    """Raised when no product has the requested identifier."""

    kind = ErrorKind.NOT_FOUND
    default_error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: UUID):
        super().__init__(
            message=f"Product not found: {product_id}",
            details={"product_id": str(product_id)},
        )
        self.product_id = product_id


class RepositoryFailure(CatalogException):
    """Raised when the persistent store fails; carries the store error as cause."""

    kind = ErrorKind.REPOSITORY_FAILURE
    default_error_code = "REPOSITORY_FAILURE"

    def __init__(
        self,
        operation: str,
        cause: Optional[BaseException] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(
            message=f"Product repository failed during '{operation}'",
            error_code=error_code,
            details={"operation": operation},
            cause=cause,
        )
        self.operation = operation


class RepositoryTimeout(RepositoryFailure):
    """Raised when a store operation or the caller's deadline expires."""

    default_error_code = "REPOSITORY_TIMEOUT"

    def __init__(
        self,
        operation: str,
        timeout_seconds: Optional[float] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(operation=operation, cause=cause)
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is not None:
            self.details["timeout_seconds"] = timeout_seconds
