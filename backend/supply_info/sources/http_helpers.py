"""Shared httpx error handling for upstream sources."""

import logging

import httpx

from supply_info.constants import ERROR_BODY_PREVIEW_CHARS
from supply_info.exceptions import FetchError

logger = logging.getLogger(__name__)


def to_fetch_error(exc: Exception, source: str, timeout: float) -> FetchError:
    """Translate an httpx / decoding failure into a FetchError naming the source."""
    if isinstance(exc, httpx.TimeoutException):
        message = f"{source} timed out after {timeout}s"
    elif isinstance(exc, httpx.HTTPStatusError):
        body = exc.response.text[:ERROR_BODY_PREVIEW_CHARS]
        message = f"{source} returned HTTP {exc.response.status_code}: {body}"
    elif isinstance(exc, httpx.RequestError):
        message = f"{source} request failed, no response received: {exc}"
    elif isinstance(exc, ValueError):
        message = f"{source} returned a body that is not valid JSON: {exc}"
    else:
        message = f"{source} request failed: {exc}"

    logger.error(message)
    return FetchError(message, source=source)
