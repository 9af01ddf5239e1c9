"""
Catalog Domain Exceptions

Base exception shared by every domain-level error in the catalog.
Each error carries a machine-readable kind and error code, optional details,
and the underlying infrastructure error (if any) in an explicit ``cause`` field.
"""

from enum import Enum
from typing import Optional, Any, Dict


class ErrorKind(str, Enum):
    """Classification callers branch on instead of message text."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    REPOSITORY_FAILURE = "repository_failure"
    CACHE_FAILURE = "cache_failure"


class CatalogException(Exception):
    """Base exception for catalog domain errors.

    Subclasses set ``kind`` and a default ``error_code``. The ``cause`` field
    keeps the original error available for diagnostics without callers having
    to walk ``__cause__`` chains.
    """

    kind: ErrorKind = ErrorKind.REPOSITORY_FAILURE
    default_error_code: str = "CATALOG_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause
        if cause is not None:
            self.details.setdefault("cause_type", type(cause).__name__)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable summary used for structured logging."""
        return {
            "kind": self.kind.value,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
