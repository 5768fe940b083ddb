"""
Hacker News Scraper
Front-page discovery, covered-story dedup and comment trees
Uses the Algolia HN Search API: https://hn.algolia.com/api
"""
from datetime import datetime, timedelta, timezone
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from .base import RateLimitedScraper
from config import get_settings
from fetching import BoundedFetcher
from models import Comment, CoveredStory, Story
from storage import CacheStore, CoveredStoryLedger, covered_ids, get_cache
from utils.exceptions import FetchError, InsufficientStoriesError, ScraperError


logger = logging.getLogger(__name__)

# Recurring monthly threads that are not news
NOISE_PATTERN = re.compile(r"who is hiring", re.IGNORECASE)


class HackerNewsScraper(RateLimitedScraper[Story]):
    """
    Hacker News scraper (Algolia API)

    Features:
    - Front page discovery with over-fetch to absorb filtering
    - Exclusion of stories covered in the last retention window
    - Noise filter for recurring threads
    - Recursive comment trees per story
    """

    ALGOLIA_URL = "https://hn.algolia.com/api/v1"

    def __init__(
        self,
        fetcher: Optional[BoundedFetcher] = None,
        cache: Optional[CacheStore] = None,
    ):
        """
        Args:
            fetcher: Shared bounded fetcher
            cache: Cache holding the covered-story ledger
        """
        super().__init__(requests_per_second=get_settings().hackernews.requests_per_second)
        self.hn_settings = self.settings.hackernews
        self.fetcher = fetcher or BoundedFetcher()
        self.cache = cache or get_cache()
        self.ledger = CoveredStoryLedger(
            self.cache,
            retention=timedelta(hours=self.hn_settings.covered_retention_hours),
        )

    @property
    def name(self) -> str:
        return "Hacker News"

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        await self._wait_for_rate_limit()
        try:
            return await self.fetcher.fetch_json(url, params=params)
        except (FetchError, httpx.HTTPError, ValueError) as e:
            self._log_error(f"Request to {url} failed", e)
            raise ScraperError(f"Hacker News request failed: {url}", source=self.name, cause=str(e)) from e

    async def front_page(self, hits: int) -> List[Story]:
        """
        Current front page, in rank order

        Args:
            hits: Page size
        """
        logger.info(f"[Hacker News] Fetching {hits} front page stories")
        data = await self._get_json(
            f"{self.ALGOLIA_URL}/search",
            params={"tags": "front_page", "hitsPerPage": hits},
        )
        stories = []
        for hit in (data or {}).get("hits", []):
            story = self._convert_algolia_to_story(hit)
            if story:
                stories.append(story)
        logger.info(f"[Hacker News] Fetched {len(stories)} front page stories")
        return stories

    async def discover(self, count: Optional[int] = None, *, now: Optional[datetime] = None) -> List[Story]:
        """
        Pick the stories for this run

        Args:
            count: Number of stories wanted
            now: Reference time for the covered-story retention window

        Returns:
            Exactly ``count`` stories

        Raises:
            InsufficientStoriesError: fewer than ``count`` remain after filtering
            ScraperError: the index could not be queried
        """
        if count is None:
            count = self.hn_settings.story_count
        if count <= 0:
            return []
        now = now or datetime.now(timezone.utc)

        candidates = await self.front_page(count + self.hn_settings.overfetch_margin)
        covered = self.ledger.load(now=now)
        excluded = covered_ids(covered)

        selected: List[Story] = []
        for story in candidates:
            if story.story_id in excluded:
                logger.info(f"[Hacker News] Skipping already covered story {story.story_id}: {story.title}")
                continue
            if NOISE_PATTERN.search(story.title):
                logger.info(f"[Hacker News] Skipping noise story {story.story_id}: {story.title}")
                continue
            excluded.add(story.story_id)
            selected.append(story)

        selected = selected[:count]
        if len(selected) < count:
            raise InsufficientStoriesError(found=len(selected), expected=count)

        if self.settings.runtime.ci:
            self.ledger.save(covered + [CoveredStory(id=story.story_id, covered_at=now) for story in selected])
            logger.info(f"[Hacker News] Recorded {len(selected)} covered stories")
        else:
            logger.info("[Hacker News] Not running in CI, covered stories not persisted")

        return selected

    async def fetch_item(self, item_id: int) -> Dict[str, Any]:
        """Raw item JSON including the recursive ``children`` tree"""
        data = await self._get_json(f"{self.ALGOLIA_URL}/items/{item_id}")
        if not isinstance(data, dict):
            raise ScraperError(f"Unexpected item payload for {item_id}", source=self.name)
        return data

    async def fetch_comments(self, story_id: int) -> List[Comment]:
        """Top-level comments of a story, each with its replies"""
        item = await self.fetch_item(story_id)
        comments = [self._convert_comment(child) for child in item.get("children") or []]
        logger.info(f"[Hacker News] Fetched {len(comments)} top-level comments for story {story_id}")
        return comments

    async def get_details(self, item_id: int) -> Optional[Story]:
        """A single story by id, None when the item is not a story"""
        item = await self.fetch_item(item_id)
        if item.get("type") not in (None, "story", "poll", "job") or not item.get("title"):
            return None
        return Story(
            story_id=int(item["id"]),
            title=item["title"],
            url=item.get("url") or None,
            raw_text=item.get("text") or None,
            points=item.get("points") or 0,
            discussion_url=Story.discussion_url_for(int(item["id"])),
        )

    def _convert_algolia_to_story(self, data: Dict[str, Any]) -> Optional[Story]:
        """Convert an Algolia search hit to a Story"""
        if not data:
            return None
        raw_id = data.get("story_id") or data.get("objectID")
        try:
            story_id = int(raw_id)
        except (TypeError, ValueError):
            return None

        return Story(
            story_id=story_id,
            title=data.get("title") or "Untitled",
            url=data.get("url") or None,
            raw_text=data.get("story_text") or None,
            points=data.get("points") or 0,
            discussion_url=Story.discussion_url_for(story_id),
        )

    def _convert_comment(self, data: Dict[str, Any]) -> Comment:
        return Comment(
            id=int(data.get("id") or 0),
            author=data.get("author"),
            text=data.get("text"),
            created_at=data.get("created_at"),
            children=[self._convert_comment(child) for child in data.get("children") or []],
        )
