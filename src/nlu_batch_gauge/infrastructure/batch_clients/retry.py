"""
Transient error retry policy

Re-executes an async HTTP operation when it fails with a transient status code,
honoring the server's Retry-After header between attempts.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from http import HTTPStatus
from typing import TypeVar

import httpx

from nlu_batch_gauge.cancellation import CancellationToken, run_cancellable, sleep
from nlu_batch_gauge.domain.constants import (
    DEFAULT_TRANSIENT_DELAY_SECONDS,
    MAX_TRANSIENT_ATTEMPTS,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRY_AFTER_SECONDS_RE = re.compile(r"^\d+$")


def is_transient_status_code(status_code: int) -> bool:
    """429, or any 5xx except 501 Not Implemented and 505 HTTP Version Not Supported"""
    return status_code == HTTPStatus.TOO_MANY_REQUESTS or (
        status_code >= HTTPStatus.INTERNAL_SERVER_ERROR
        and status_code != HTTPStatus.NOT_IMPLEMENTED
        and status_code != HTTPStatus.HTTP_VERSION_NOT_SUPPORTED
    )


def get_retry_after_delay(
    retry_after: str | None,
    default_delay: float = DEFAULT_TRANSIENT_DELAY_SECONDS,
) -> float:
    """
    Compute the delay (seconds) requested by a Retry-After header value.

    Args:
        retry_after: Header value, either delta-seconds or an HTTP-date
        default_delay: Delay used when the header is absent

    Returns:
        Delay in seconds. An HTTP-date in the past yields a negative value.
    """
    if retry_after is None:
        return default_delay

    retry_after = retry_after.strip()
    if _RETRY_AFTER_SECONDS_RE.match(retry_after):
        return float(int(retry_after))

    retry_at = parsedate_to_datetime(retry_after)
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return (retry_at - datetime.now(timezone.utc)).total_seconds()


def _transient_response(error: BaseException) -> httpx.Response | None:
    if isinstance(error, httpx.HTTPStatusError) and is_transient_status_code(error.response.status_code):
        return error.response
    return None


async def on_transient_error(
    operation: Callable[[], Awaitable[T]],
    cancellation_token: CancellationToken | None = None,
    max_attempts: int = MAX_TRANSIENT_ATTEMPTS,
    default_delay: float = DEFAULT_TRANSIENT_DELAY_SECONDS,
) -> T:
    """
    Execute operation, retrying on transient HTTP errors.

    Args:
        operation: The async function to run (a callable with no arguments)
        cancellation_token: Token checked before every attempt and raced against
            each attempt and each back-off
        max_attempts: Total number of attempts, including the first
        default_delay: Back-off used when the response has no Retry-After header

    Returns:
        The return value of operation()

    Raises:
        ValueError: If max_attempts is less than 1
        OperationCancelledError: If cancellation is requested
        httpx.HTTPStatusError: The last transient error once attempts are exhausted
        Exception: Any non-transient error, unmodified
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")

    last_exception: httpx.HTTPStatusError | None = None
    for attempt in range(max_attempts):
        if cancellation_token is not None:
            cancellation_token.raise_if_cancellation_requested()

        try:
            return await run_cancellable(operation(), cancellation_token)
        except httpx.HTTPStatusError as e:
            response = _transient_response(e)
            if response is None:
                raise
            last_exception = e
            if attempt < max_attempts - 1:
                delay = get_retry_after_delay(response.headers.get("Retry-After"), default_delay)
                logger.debug(
                    "Received HTTP %d result from the batch testing API. Retrying in %.1fs (attempt %d/%d).",
                    response.status_code, max(delay, 0.0), attempt + 1, max_attempts,
                )
                await sleep(delay, cancellation_token)

    assert last_exception is not None
    raise last_exception
