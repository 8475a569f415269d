"""HTTP utilities with bounded exponential-backoff retries."""

import logging
import socket
import time
from typing import Callable, Optional, TypeVar

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    stop_after_attempt,
    wait_exponential,
)

from ski_conditions.config import (
    USER_AGENT,
    REQUEST_TIMEOUT,
    MAX_RETRIES,
    RETRY_BACKOFF_BASE,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTML_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

JSON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/geo+json,application/json",
}


class FetchError(Exception):
    """Error fetching URL."""
    pass


def with_retry(
    operation: Callable[[], T],
    max_retries: int = MAX_RETRIES,
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """
    Call operation, retrying any exception with exponential backoff.

    Waits RETRY_BACKOFF_BASE seconds after the first failure and doubles
    the wait after each further failure. No jitter.

    Args:
        operation: Zero-argument callable to invoke
        max_retries: Total number of attempts
        sleep: Sleep function, defaults to time.sleep

    Returns:
        Whatever operation returns on its first successful attempt

    Raises:
        The exception raised by the final attempt
    """
    def log_retry(retry_state: RetryCallState) -> None:
        logger.info(f"Retry {retry_state.attempt_number}/{max_retries}")

    retryer = Retrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=RETRY_BACKOFF_BASE, exp_base=2),
        before_sleep=log_retry,
        sleep=sleep or time.sleep,
        reraise=True,
    )
    return retryer(operation)


def _get(url: str, headers: dict) -> requests.Response:
    """Single GET attempt; any non-2xx status raises so it is retried."""
    response = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response


def fetch(url: str, headers: Optional[dict] = None) -> str:
    """
    Fetch URL content with retries.

    Args:
        url: URL to fetch
        headers: Request headers, defaults to HTML_HEADERS

    Returns:
        Response text content

    Raises:
        FetchError: If fetch fails after retries
    """
    headers = headers or HTML_HEADERS

    try:
        logger.debug(f"Fetching: {url}")
        response = with_retry(lambda: _get(url, headers))
        return response.text

    except requests.exceptions.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e


def fetch_json(url: str) -> dict:
    """
    Fetch JSON from URL with retries.

    Args:
        url: URL to fetch

    Returns:
        Parsed JSON as dict

    Raises:
        FetchError: If fetch or parse fails
    """
    try:
        logger.debug(f"Fetching JSON: {url}")
        response = with_retry(lambda: _get(url, JSON_HEADERS))
        return response.json()

    except ValueError as e:
        raise FetchError(f"Invalid JSON from {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e


def post_json(url: str, payload: dict, timeout: int = REQUEST_TIMEOUT) -> requests.Response:
    """POST a JSON payload once, without retries."""
    response = requests.post(
        url,
        json=payload,
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
    )
    response.raise_for_status()
    return response


def resolves(hostname: str) -> bool:
    """Check whether hostname resolves via DNS."""
    try:
        socket.getaddrinfo(hostname, 443)
        return True
    except OSError as e:
        logger.error(f"DNS lookup failed for {hostname}: {e}")
        return False
