"""
Exceptions raised by the content pipeline and the document store.

Each error carries the HTTP status it maps to; the handlers in
``kalima.main`` turn them into ``{"message": ...}`` responses.
"""

from typing import Any, Dict, List, Optional


class KalimaError(Exception):
    """Base exception for the application."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(KalimaError):
    """Malformed or missing fields in a submission."""

    status_code = 400

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        self.errors = errors
        if message is None:
            joined = ", ".join(f"{e['field']}: {e['message']}" for e in errors)
            message = f"Validation error: {joined}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class InvariantError(KalimaError):
    """Cross-field invariant broken (available languages vs translations)."""

    status_code = 400


class ConflictError(KalimaError):
    """A document with the same slug already exists."""

    status_code = 409


class NotFoundError(KalimaError):
    """Target document does not exist."""

    status_code = 404


class StoreError(KalimaError):
    """Failure reported by the document store or the identity provider."""

    status_code = 500
