"""
Application-layer exceptions.

These exceptions are used across the core, application and infrastructure
layers. Every error carries a stable ``kind`` so callers can branch on the
discriminant instead of on message text.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Stable discriminant for engine errors."""
    MALFORMED_INPUT = "malformed_input"
    INVALID_PARAMETER = "invalid_parameter"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


class EngineError(Exception):
    """Base class for all typed errors raised by the engine."""

    kind: ErrorKind = ErrorKind.INVALID_PARAMETER

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logging or API layers."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class MalformedInputError(EngineError):
    """Import text is missing its header or body."""

    kind = ErrorKind.MALFORMED_INPUT


class InvalidParameterError(EngineError):
    """A caller-supplied parameter is out of range.

    Raised for bad *parameters* only (window size, smoothing factor, horizon).
    Odd *data* degrades to trivial output instead.
    """

    kind = ErrorKind.INVALID_PARAMETER


class NotFoundError(EngineError):
    """A referenced record does not exist or belongs to another owner."""

    kind = ErrorKind.NOT_FOUND


class RepositoryError(EngineError):
    """A persistence adapter call failed."""

    kind = ErrorKind.PERSISTENCE
