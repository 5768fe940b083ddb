"""
Base Domain Handler
Common produce() contract for platform-specific visual strategies
"""
from abc import ABC, abstractmethod
from pathlib import Path
import logging
from typing import Optional

from browser import BrowserRenderer
from config import HandlerSettings, get_settings
from fetching import BoundedFetcher
from storage import CacheStore, screenshot_key
from utils.exceptions import DomainHandlerError, FetchError, RenderError


logger = logging.getLogger(__name__)


class DomainHandler(ABC):
    """
    Platform strategy: build a synthetic card from structured data, then
    capture it through the shared browser pipeline.

    Callers only depend on ``produce``; any failure surfaces as
    ``DomainHandlerError`` so the caller can move on to the fallback card.
    """

    def __init__(
        self,
        fetcher: BoundedFetcher,
        renderer: BrowserRenderer,
        cache: CacheStore,
        settings: HandlerSettings = None,
    ):
        self.fetcher = fetcher
        self.renderer = renderer
        self.cache = cache
        self.settings = settings or get_settings().handlers

    @property
    @abstractmethod
    def name(self) -> str:
        """Log tag and handler kind"""
        pass

    @abstractmethod
    async def build_card(self, url: str, title: Optional[str] = None) -> str:
        """
        Fetch platform metadata and return the card HTML.

        ``title`` is the story title, for cards that caption with it.

        Raises:
            DomainHandlerError: metadata missing or malformed
        """
        pass

    async def produce(self, url: str, story_id: int, title: Optional[str] = None) -> Path:
        """
        Produce the visual for a story.

        Returns:
            Path of the PNG in the cache directory
        """
        key = screenshot_key(story_id)
        target = self.cache.path(key)
        if self.cache.exists(key):
            logger.info(f"[{self.name}] Using cached: {key}")
            return target

        try:
            card_html = await self.build_card(url, title)
            await self.renderer.capture_html(card_html, target)
        except DomainHandlerError:
            raise
        except (FetchError, RenderError) as e:
            raise DomainHandlerError(f"{self.name} handler failed for {url}: {e}", handler=self.name) from e

        logger.info(f"[{self.name}] Saved: {key}")
        return target

    def _fail(self, message: str) -> DomainHandlerError:
        logger.warning(f"[{self.name}] {message}")
        return DomainHandlerError(message, handler=self.name)
