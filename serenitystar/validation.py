"""
Serenity Star SDK - Input validation helpers.

Provides validation functions for client-side parameter checking before API calls.
"""

import os
from typing import Any, Optional

from .exceptions import ValidationError as SDKValidationError

SUPPORTED_UPLOAD_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".md": "text/markdown",
    ".jpg": "image/jpg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


class InputValidationError(SDKValidationError):
    """Raised when input validation fails before making an API request."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, status_code=None, response=None)
        self.field = field
        self.value = value


ValidationError = InputValidationError


def validate_required(value: Any, field_name: str) -> None:
    """Validate that a required field is not None or empty."""
    if value is None:
        raise ValidationError(f"{field_name} is required", field=field_name)
    if isinstance(value, str) and not value.strip():
        raise ValidationError(f"{field_name} cannot be empty", field=field_name, value=value)


def validate_positive_int(value: Optional[int], field_name: str) -> None:
    """Validate that a number is a positive integer."""
    if value is None:
        return

    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be an integer",
            field=field_name,
            value=value,
        )

    if value <= 0:
        raise ValidationError(
            f"{field_name} must be positive",
            field=field_name,
            value=value,
        )


def validate_non_negative(value: Optional[float], field_name: str) -> None:
    """Validate that a number is non-negative."""
    if value is None:
        return

    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number",
            field=field_name,
            value=value,
        )

    if value < 0:
        raise ValidationError(
            f"{field_name} cannot be negative",
            field=field_name,
            value=value,
        )


def content_type_for(file_name: str) -> str:
    """Return the MIME type used to upload ``file_name``.

    Raises:
        InputValidationError: If the extension is not accepted by the
            volatile knowledge endpoint.
    """
    extension = os.path.splitext(file_name)[1].lower()
    try:
        return SUPPORTED_UPLOAD_TYPES[extension]
    except KeyError:
        raise ValidationError(
            f"File extension '{extension}' is not supported for upload",
            field="file_name",
            value=file_name,
        ) from None


def validate_upload_request(
    content: Optional[str],
    file: Any,
    file_name: Optional[str],
) -> None:
    """Validate that exactly one of content or file is supplied."""
    has_content = bool(content)
    has_file = file is not None

    if has_content and has_file:
        raise ValidationError(
            "Only one of content or file should be provided, not both",
            field="content",
        )

    if not has_content and not has_file:
        raise ValidationError("Either content or file must be provided", field="content")

    if has_file:
        validate_required(file_name, "file_name")
        content_type_for(file_name)
