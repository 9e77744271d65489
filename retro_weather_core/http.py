"""Resilient HTTP GET with timeout, retry and exponential backoff."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from .const import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_MS,
    USER_AGENT,
)
from .errors import create_network_error, create_timeout_error, is_retryable_status

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry/timeout settings for one logical request.

    Attributes:
        max_retries: Extra attempts after the first one.
        base_delay_ms: Backoff delay before the first retry (before jitter).
        max_delay_ms: Upper bound for any single backoff delay.
        timeout_ms: Timeout for a single attempt.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms <= 0:
            raise ValueError("base_delay_ms must be > 0")
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")


DEFAULT_RETRY = RetryPolicy()


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """A completed HTTP response with its body already read."""

    status: int
    url: str
    body: bytes = b""
    reason: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON.
        """
        return json.loads(self.body)


def compute_backoff_delay(
    attempt: int, policy: RetryPolicy, jitter: float | None = None
) -> float:
    """Return the delay in ms to wait after a failed ``attempt`` (0-based).

    ``jitter`` is drawn from [0.5, 1.0) when not given.
    """
    if jitter is None:
        jitter = 0.5 + random.random() * 0.5
    return min(policy.base_delay_ms * (2**attempt) * jitter, policy.max_delay_ms)


async def _backoff_sleep(delay_ms: float) -> None:
    await asyncio.sleep(delay_ms / 1000)


async def fetch_with_retry(
    session: aiohttp.ClientSession,
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    policy: RetryPolicy = DEFAULT_RETRY,
) -> FetchResponse:
    """GET ``url``, retrying transient failures with exponential backoff.

    Successful responses and non-retryable failures (4xx other than 429) are
    returned as-is; callers decide what a non-ok status means. Retryable
    statuses (429, 5xx) and transport errors are retried up to
    ``policy.max_retries`` times. A timeout ends the call immediately.

    Raises:
        WeatherTimeout: If an attempt exceeds ``policy.timeout_ms``.
        WeatherNetworkError: If every attempt failed.
    """
    request_headers = {"User-Agent": USER_AGENT, **(headers or {})}
    timeout = aiohttp.ClientTimeout(total=policy.timeout_ms / 1000)
    attempts = policy.max_retries + 1
    last_error: Exception | None = None

    for attempt in range(attempts):
        _LOGGER.debug("GET %s (attempt %d/%d)", url, attempt + 1, attempts)
        try:
            async with session.get(
                url, headers=request_headers, timeout=timeout
            ) as resp:
                response = FetchResponse(
                    status=resp.status,
                    url=url,
                    body=await resp.read(),
                    reason=resp.reason,
                    headers=dict(resp.headers),
                )
        except TimeoutError as err:
            # Terminal: no further attempts, no backoff
            raise create_timeout_error(
                f"Request timed out after {policy.timeout_ms}ms"
            ) from err
        except aiohttp.ClientError as err:
            last_error = err
            _LOGGER.warning(
                "GET %s failed (attempt %d/%d): %s", url, attempt + 1, attempts, err
            )
        else:
            if response.ok or not is_retryable_status(response.status):
                return response
            last_error = RuntimeError(f"HTTP {response.status}: {response.reason}")
            _LOGGER.warning(
                "GET %s returned %d (attempt %d/%d)",
                url,
                response.status,
                attempt + 1,
                attempts,
            )

        if attempt < policy.max_retries:
            delay = compute_backoff_delay(attempt, policy)
            _LOGGER.debug("Retrying %s in %.0fms", url, delay)
            await _backoff_sleep(delay)

    message = f"Failed after {attempts} attempts: {last_error or 'Unknown error'}"
    raise create_network_error(message, last_error) from last_error
