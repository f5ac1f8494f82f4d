"""
Domain exceptions for the CareCompare search service.

Services raise these; the API layer turns them into problem documents via
``to_http_exception()``. Invalid search input is a ValidationException,
an unknown template is a NotFoundException, and a failed read of the
catalog or price store is a RepositoryException.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Search input was rejected before any geocoding or retrieval."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """A requested catalog entry does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class RepositoryException(Exception):
    """
    Raised when reading the catalog or price store fails.

    Wraps the underlying SQLAlchemyError message. Never retried inside the
    search path.
    """
