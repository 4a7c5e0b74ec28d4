"""
Serenity Star SDK - HTTP response handling shared by all scopes.
"""

import logging
from typing import Any, Callable, Mapping, Optional, TypeVar

import httpx

from .exceptions import (
    APIError,
    AuthenticationError,
    DecodeError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger("serenitystar.responses")

T = TypeVar("T")


def _json_or_none(response: httpx.Response) -> Optional[Any]:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def raise_for_status(response: httpx.Response) -> None:
    """Raise the SDK exception matching a non-success response.

    The body must already be read.
    """
    if response.is_success:
        return

    status = response.status_code
    body = response.text
    data = _json_or_none(response)
    logger.warning("Request %s %s failed with status %d", response.request.method, response.request.url.path, status)

    message = f"Request failed with status code {status}: {body}"
    if status == 404:
        raise NotFoundError(message, status_code=status, response=data, body=body)
    if status in (401, 403):
        raise AuthenticationError(message, status_code=status, response=data, body=body)
    if status == 400:
        errors = data.get("errors") if isinstance(data, dict) else None
        raise ValidationError(message, errors=errors, status_code=status, response=data, body=body)
    raise APIError(message, status_code=status, response=data, body=body)


def handle_response(response: httpx.Response) -> Any:
    """Raise on failure, otherwise decode the JSON body (``{}`` when empty)."""
    raise_for_status(response)
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(
            f"Failed to decode response body: {e}",
            status_code=response.status_code,
            body=response.text,
        ) from e


def handle_object_response(response: httpx.Response) -> dict[str, Any]:
    """Like :func:`handle_response` but requires a JSON object."""
    data = handle_response(response)
    if not isinstance(data, dict):
        raise DecodeError(
            "Expected a JSON object in response body",
            status_code=response.status_code,
            body=response.text,
        )
    return data


def decode_model(response: httpx.Response, from_dict: Callable[[Mapping[str, Any]], T]) -> T:
    """Decode a JSON object body into a model.

    Raises:
        DecodeError: If a field of the body has an unexpected shape.
    """
    data = handle_object_response(response)
    try:
        return from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise DecodeError(
            f"Unexpected response body: {e}",
            status_code=response.status_code,
            response=data,
            body=response.text,
        ) from e


def ensure_stream_success(response: httpx.Response) -> None:
    """Read the body of a failed streaming response and raise."""
    if not response.is_success:
        response.read()
        raise_for_status(response)


async def aensure_stream_success(response: httpx.Response) -> None:
    """Async counterpart of :func:`ensure_stream_success`."""
    if not response.is_success:
        await response.aread()
        raise_for_status(response)
