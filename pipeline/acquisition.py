"""
Acquisition Pipeline
Discovery followed by text, comments and visuals for each story
"""
from __future__ import annotations

import logging
from typing import List, Optional

from browser import BrowserConfig, BrowserRenderer, SessionFactory, launch_session
from config import get_settings
from fetching import BoundedFetcher
from models import (
    AcquiredContent,
    AcquiredStory,
    CaptureOrigin,
    Comment,
    ContentMethod,
    ExtractedContent,
    Story,
    VisualCapture,
)
from scrapers import HackerNewsScraper
from storage import CacheStore, get_cache
from utils.exceptions import RecapError, ScraperError
from visuals import DomainRouter, FallbackImageGenerator, VisualAcquirer

from .content import PLACEHOLDER_TEXT, ContentAcquirer, derive_source


logger = logging.getLogger(__name__)


class AcquisitionPipeline:
    """
    Runs every story through both cascades, one story at a time.

    A failure inside one story degrades that story only; discovery failures
    (index unreachable, not enough stories) end the run.
    """

    def __init__(
        self,
        scraper: HackerNewsScraper,
        content: ContentAcquirer,
        visuals: VisualAcquirer,
    ):
        self.scraper = scraper
        self.content = content
        self.visuals = visuals

    @classmethod
    def from_settings(
        cls,
        cache: Optional[CacheStore] = None,
        session_factory: SessionFactory = launch_session,
        fetcher: Optional[BoundedFetcher] = None,
    ) -> "AcquisitionPipeline":
        """Wire the default components from configuration."""
        settings = get_settings()
        cache = cache or get_cache()
        fetcher = fetcher or BoundedFetcher()
        renderer = BrowserRenderer(BrowserConfig.from_settings(settings.browser), session_factory)
        router = DomainRouter.default(fetcher, renderer, cache, settings.handlers)
        fallback = FallbackImageGenerator(fetcher, renderer, cache)
        return cls(
            scraper=HackerNewsScraper(fetcher, cache),
            content=ContentAcquirer(fetcher, cache, renderer, settings.extraction.min_text_length),
            visuals=VisualAcquirer(cache, renderer, router, fallback),
        )

    async def _comments(self, story: Story) -> List[Comment]:
        try:
            return await self.scraper.fetch_comments(story.story_id)
        except ScraperError as e:
            logger.warning(f"[Hacker News] No comments for story {story.story_id}: {e.message}")
            return []

    async def _degraded(self, story: Story) -> AcquiredStory:
        content = AcquiredContent(
            content=ExtractedContent(text=PLACEHOLDER_TEXT, title=story.title),
            source=derive_source(story, None),
            method=ContentMethod.PLACEHOLDER,
        )
        path = await self.visuals.fallback.generate(story.title, content.source, story.story_id)
        capture = VisualCapture(story_id=story.story_id, path=path, origin=CaptureOrigin.FALLBACK)
        return AcquiredStory(story=story, content=content, capture=capture)

    async def acquire_story(self, story: Story) -> AcquiredStory:
        logger.info(f"Acquiring story {story.story_id}: {story.title}")
        try:
            comments = await self._comments(story)
            content = await self.content.acquire(story)
            capture = await self.visuals.acquire(story)
        except RecapError as e:
            logger.error(f"Story {story.story_id} failed, using degraded output: {e}")
            return await self._degraded(story)

        logger.info(
            f"Story {story.story_id}: text via {content.method.value} ({len(content.content.text)} chars), "
            f"image via {capture.origin.value}, {len(comments)} top-level comments"
        )
        return AcquiredStory(story=story, content=content, comments=comments, capture=capture)

    async def run(self, count: Optional[int] = None) -> List[AcquiredStory]:
        """
        Discover and acquire stories

        Raises:
            InsufficientStoriesError: discovery found too few stories
            ScraperError: the news index could not be queried
        """
        stories = await self.scraper.discover(count)
        results = []
        for index, story in enumerate(stories, 1):
            logger.info(f"Story {index}/{len(stories)}")
            results.append(await self.acquire_story(story))
        return results
