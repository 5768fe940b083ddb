"""
Domain Handlers
Registry dispatch from URL shape to a platform-specific visual strategy
"""
import re
from typing import List, Optional, Pattern, Tuple

from browser import BrowserRenderer
from config import HandlerSettings
from fetching import BoundedFetcher
from storage import CacheStore

from .base import DomainHandler
from .github import GitHubHandler, extract_og_image
from .twitter import (
    Tweet,
    TwitterHandler,
    extract_tweet_path,
    parse_tweet_from_nitter,
    parse_tweet_from_oembed,
)
from .youtube import YouTubeHandler, extract_video_id


YOUTUBE_PATTERN = re.compile(r"^https?://(?:www\.|m\.)?(?:youtube\.com|youtu\.be)/")
GITHUB_PATTERN = re.compile(r"^https?://github\.com/")
TWITTER_PATTERN = re.compile(r"^https?://(?:(?:mobile\.)?twitter\.com|x\.com)/")


class DomainRouter:
    """
    Ordered (pattern, handler) registry.

    New platforms are added with ``register``; the first matching entry wins.
    """

    def __init__(self, entries: Optional[List[Tuple[Pattern, DomainHandler]]] = None):
        self._entries: List[Tuple[Pattern, DomainHandler]] = list(entries or [])

    def register(self, pattern, handler: DomainHandler) -> "DomainRouter":
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        self._entries.append((compiled, handler))
        return self

    def route(self, url: Optional[str]) -> Optional[DomainHandler]:
        """Handler for the URL, or None for the generic capture path."""
        if not url:
            return None
        for pattern, handler in self._entries:
            if pattern.search(url):
                return handler
        return None

    @classmethod
    def default(
        cls,
        fetcher: BoundedFetcher,
        renderer: BrowserRenderer,
        cache: CacheStore,
        settings: HandlerSettings = None,
    ) -> "DomainRouter":
        """YouTube, GitHub and Twitter/X, sharing one fetcher, renderer and cache."""
        return (
            cls()
            .register(YOUTUBE_PATTERN, YouTubeHandler(fetcher, renderer, cache, settings))
            .register(GITHUB_PATTERN, GitHubHandler(fetcher, renderer, cache, settings))
            .register(TWITTER_PATTERN, TwitterHandler(fetcher, renderer, cache, settings))
        )


__all__ = [
    "DomainRouter",
    "DomainHandler",
    "YOUTUBE_PATTERN",
    "GITHUB_PATTERN",
    "TWITTER_PATTERN",
    # Twitter
    "TwitterHandler",
    "Tweet",
    "extract_tweet_path",
    "parse_tweet_from_nitter",
    "parse_tweet_from_oembed",
    # GitHub
    "GitHubHandler",
    "extract_og_image",
    # YouTube
    "YouTubeHandler",
    "extract_video_id",
]
