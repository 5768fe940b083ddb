"""
Base Scraper
Abstract base for news-index scrapers
"""
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar
import asyncio
import logging
import time

from config import get_settings


logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseScraper(ABC, Generic[T]):
    """
    Scraper base class
    Concrete scrapers implement ``name`` and ``get_details``
    """

    def __init__(self):
        self.settings = get_settings()

    @property
    @abstractmethod
    def name(self) -> str:
        """Scraper name, used as log tag"""
        pass

    @abstractmethod
    async def get_details(self, item_id: int) -> Optional[T]:
        """
        Fetch a single item

        Args:
            item_id: Item id

        Returns:
            The item, or None when it does not exist
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release resources (HTTP clients are per-request, nothing to do by default)"""
        pass

    def _log_error(self, message: str, error: Exception):
        logger.error(f"[{self.name}] {message}: {error}")


class RateLimitedScraper(BaseScraper[T]):
    """
    Scraper base class with a request rate limit
    """

    def __init__(self, requests_per_second: float = 1.0):
        super().__init__()
        self._rate_limit = requests_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()

    async def _wait_for_rate_limit(self):
        """Sleep until the next request is allowed"""
        async with self._lock:
            current_time = time.monotonic()
            time_since_last = current_time - self._last_request_time
            min_interval = 1.0 / self._rate_limit

            if time_since_last < min_interval:
                await asyncio.sleep(min_interval - time_since_last)

            self._last_request_time = time.monotonic()
