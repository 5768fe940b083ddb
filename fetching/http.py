"""
Bounded Fetcher
Plain HTTP fetch with a per-attempt timeout and a bounded number of attempts.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from config import get_settings
from utils.exceptions import FetchError


logger = logging.getLogger(__name__)

# Any failure to obtain a response; an HTTP error status is still an answer
RETRYABLE_ERRORS = (httpx.RequestError, asyncio.TimeoutError)


def _describe(error: Optional[BaseException]) -> str:
    if error is None:
        return "unknown error"
    if isinstance(error, asyncio.TimeoutError):
        return "timed out"
    return str(error) or type(error).__name__


class BoundedFetcher:
    """
    Wraps every outbound content fetch so one hanging origin cannot stall a run.

    HTTP error statuses are returned as-is (a 403 challenge page is still
    content for the escalation heuristic); request failures (transport,
    redirect loops, undecodable bodies) and timeouts are retried and end in
    ``FetchError``. There is no delay between attempts.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Per-attempt timeout in seconds
            max_attempts: Attempts before raising FetchError
            user_agent: User-Agent header
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        """
        settings = get_settings().fetch
        self.timeout = timeout if timeout is not None else settings.timeout_seconds
        self.max_attempts = max_attempts if max_attempts is not None else settings.max_attempts
        self.user_agent = user_agent or settings.user_agent
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def fetch(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Fetch a URL.

        Args:
            url: Target URL
            timeout: Per-attempt timeout (seconds), overrides the default
            max_attempts: Attempt budget, overrides the default
            method: HTTP method
            headers: Extra request headers
            params: Query parameters

        Returns:
            The response of the first attempt that completed, whatever its status

        Raises:
            FetchError: every attempt failed; the last cause is chained
        """
        timeout = self.timeout if timeout is None else timeout
        attempts = self.max_attempts if max_attempts is None else max_attempts

        def _log_retry(state: RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            logger.warning(f"[Fetch] Attempt {state.attempt_number} failed for {url}. {_describe(error)}")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, attempts)),
            wait=wait_none(),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=_log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    async with self._client(timeout) as client:
                        response = await asyncio.wait_for(
                            client.request(method, url, headers=headers, params=params),
                            timeout=timeout,
                        )
                        await response.aread()
                        return response
        except RetryError as e:
            last = e.last_attempt.exception()
            logger.error(f"[Fetch] Failed to fetch {url} after {attempts} attempts: {_describe(last)}")
            raise FetchError(
                f"Failed to fetch {url} after {attempts} attempts",
                url=url,
                attempts=attempts,
                cause=_describe(last),
            ) from last

        # Unreachable: AsyncRetrying either yields a successful attempt or raises
        raise FetchError(f"Failed to fetch {url}", url=url, attempts=attempts)

    async def fetch_text(self, url: str, **kwargs) -> str:
        response = await self.fetch(url, **kwargs)
        return response.text

    async def fetch_bytes(self, url: str, **kwargs) -> bytes:
        response = await self.fetch(url, **kwargs)
        return response.content

    async def fetch_json(self, url: str, **kwargs) -> Any:
        """Fetch and decode JSON; unlike ``fetch`` a non-2xx status is an error here."""
        response = await self.fetch(url, **kwargs)
        response.raise_for_status()
        return response.json()
