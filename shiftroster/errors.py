"""Exceptions shared by the roster services and the web layer."""
from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def to_dict(self) -> Dict[str, Any]:
        return {"message": str(self)}


class ValidationError(DomainError):
    """Raised when input data is malformed; carries the offending field."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no session exists."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when the caller lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced employee does not exist."""

    status_code = 404


class StorageError(RuntimeError):
    """Raised when the SQLite layer encounters an unexpected error."""

    status_code = 503
