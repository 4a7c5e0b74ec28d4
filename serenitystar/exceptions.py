"""
Serenity Star SDK - Custom exceptions for error handling.
"""

from typing import Any, Optional


class SerenityError(Exception):
    """Base exception for all Serenity Star SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response
        self.body = body


class APIError(SerenityError):
    """Raised when an API request fails with a non-success status."""

    pass


class NotFoundError(APIError):
    """Raised when a requested agent, conversation or resource is not found."""

    pass


class AuthenticationError(APIError):
    """Raised when authentication fails or the API key is invalid."""

    pass


class ValidationError(APIError):
    """Raised when request validation fails."""

    def __init__(self, message: str, errors: Optional[Any] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.errors = errors or []


class DecodeError(SerenityError):
    """Raised when a successful response body cannot be decoded."""

    pass
