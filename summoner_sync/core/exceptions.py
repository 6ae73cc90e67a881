"""
Service layer custom exceptions.

Two kinds reach the HTTP boundary: ``ResourceNotFoundError`` when the
requested data does not exist upstream or in the store, and
``RetrievalError`` for any other upstream failure. Store errors are not
wrapped and propagate as raised by SQLAlchemy.
"""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base exception for all service layer errors."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.service = service
        self.operation = operation
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        if self.service and self.operation:
            return f"[{self.service}.{self.operation}] {self.message}"
        return self.message


class ResourceNotFoundError(ServiceException):
    """Requested summoner, matches, masteries or page do not exist."""

    pass


class RetrievalError(ServiceException):
    """Upstream failed for a reason other than the resource being absent."""

    pass
