"""
┌──────────────────────────────────────────────────────────────┐
│                    Exception Handling Flow                   │
│                                                              │
│  [Error] → [Classify] → [Log] → [Envelope] → [Client]        │
│                                                              │
│  Error Types: Validation → Duplicate → Not Found → Server     │
│  HTTP Status: 400 → 400 → 404 → 500                          │
└──────────────────────────────────────────────────────────────┘

Exception classes for the CodeScape backend
Flow: Error occurrence → Classification → Logging → JSON envelope → Client handling
"""

from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger()


class CodeScapeException(Exception):
    """
    Base exception class for the CodeScape backend.

    Every subclass carries the HTTP status code it maps to, so the
    handlers registered in ``codescape.main`` can turn it into the
    ``{success: false, message}`` envelope without inspecting its type.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        """Initialize base exception."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code

        logger.warning(
            "CodeScape exception occurred",
            error_type=self.__class__.__name__,
            message=message,
            error_code=error_code,
            status_code=status_code,
            details=details
        )


class ValidationError(CodeScapeException):
    """
    Field-level validation failure.

    Holds every violated field message, not just the first one; the
    response message is the comma-joined list.
    """

    def __init__(
        self,
        messages: List[str],
        error_code: str = "VALIDATION_ERROR"
    ):
        """Initialize validation error."""
        self.messages = list(messages)
        super().__init__(
            message=", ".join(self.messages),
            error_code=error_code,
            details={"errors": self.messages},
            status_code=400
        )


class DuplicateEmailError(CodeScapeException):
    """Raised when a participant with the same email already exists."""

    def __init__(
        self,
        email: Optional[str] = None,
        message: str = "Email already registered!",
        error_code: str = "DUPLICATE_EMAIL"
    ):
        """Initialize duplicate email error."""
        super().__init__(
            message=message,
            error_code=error_code,
            details={"email": email} if email else None,
            status_code=400
        )
        self.email = email


class NotFoundError(CodeScapeException):
    """
    Resource not found error.

    Used both for unmatched API routes and for lookups of unknown
    participant ids.
    """

    def __init__(
        self,
        message: str = "API endpoint not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        error_code: str = "NOT_FOUND"
    ):
        """Initialize not found error."""
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=404
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InternalError(CodeScapeException):
    """Unexpected failure; the client only ever sees the generic message."""

    def __init__(
        self,
        message: str = "Something went wrong!",
        error_code: str = "INTERNAL_ERROR"
    ):
        """Initialize internal error."""
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=500
        )
