"""
Twitter / X Handler
Renders a post card from oEmbed data, falling back to Nitter mirrors
"""
from dataclasses import dataclass
import logging
import re
from typing import Any, Dict, Optional

import httpx
from bs4 import BeautifulSoup

from utils.exceptions import FetchError
from visuals.cards import tweet_card

from .base import DomainHandler


logger = logging.getLogger(__name__)

OEMBED_URL = "https://publish.twitter.com/oembed"

_TWEET_PATH = re.compile(r"(?:twitter\.com|x\.com)/([^/]+/status/\d+)")


@dataclass(frozen=True)
class Tweet:
    full_name: str
    username: str
    text: str
    avatar_url: Optional[str] = None


def extract_tweet_path(url: str) -> Optional[str]:
    """``user/status/123`` from a post permalink, without query string."""
    match = _TWEET_PATH.search(url or "")
    if not match:
        return None
    return match.group(1).split("?")[0]


def parse_tweet_from_oembed(payload: Dict[str, Any]) -> Optional[Tweet]:
    """Parse a publish.twitter.com oEmbed response."""
    if not isinstance(payload, dict):
        return None
    soup = BeautifulSoup(payload.get("html") or "", "lxml")
    paragraph = soup.find("p")
    text = paragraph.get_text(" ", strip=True) if paragraph else ""
    full_name = (payload.get("author_name") or "").strip()
    author_url = (payload.get("author_url") or "").rstrip("/")
    handle = author_url.rsplit("/", 1)[-1] if author_url else ""
    if not text or not (full_name or handle):
        return None
    return Tweet(full_name=full_name or handle, username=f"@{handle}" if handle else "", text=text)


def parse_tweet_from_nitter(html: str, instance: str) -> Optional[Tweet]:
    """Parse a Nitter status page; relative avatar paths resolve against the instance."""
    soup = BeautifulSoup(html or "", "lxml")
    root = soup.select_one(".main-tweet") or soup
    full_name = root.select_one(".fullname")
    username = root.select_one(".username")
    content = root.select_one(".tweet-content")
    if full_name is None or username is None or content is None:
        return None

    text = content.get_text(" ", strip=True)
    if not text:
        return None

    avatar_url = None
    avatar = root.select_one("img.avatar")
    if avatar is not None and avatar.get("src"):
        src = avatar["src"]
        avatar_url = src if src.startswith("http") else f"https://{instance}{src}"

    return Tweet(
        full_name=full_name.get_text(strip=True),
        username=username.get_text(strip=True),
        text=text,
        avatar_url=avatar_url,
    )


class TwitterHandler(DomainHandler):
    """Social-post permalinks on twitter.com / x.com"""

    @property
    def name(self) -> str:
        return "Twitter"

    async def _from_oembed(self, tweet_path: str) -> Optional[Tweet]:
        try:
            payload = await self.fetcher.fetch_json(
                OEMBED_URL,
                params={"url": f"https://twitter.com/{tweet_path}", "omit_script": "true", "dnt": "true"},
                timeout=self.settings.metadata_timeout_seconds,
                max_attempts=1,
            )
        except (FetchError, httpx.HTTPError, ValueError) as e:
            logger.info(f"[{self.name}] oEmbed unavailable for {tweet_path}: {e}")
            return None
        return parse_tweet_from_oembed(payload)

    async def _from_nitter(self, tweet_path: str) -> Optional[Tweet]:
        for instance in self.settings.nitter_instances:
            try:
                response = await self.fetcher.fetch(
                    f"https://{instance}/{tweet_path}",
                    timeout=self.settings.metadata_timeout_seconds,
                    max_attempts=1,
                )
            except FetchError as e:
                logger.info(f"[{self.name}] {instance} unreachable: {e}")
                continue
            if not response.is_success:
                logger.info(f"[{self.name}] {instance} returned {response.status_code}")
                continue
            tweet = parse_tweet_from_nitter(response.text, instance)
            if tweet:
                return tweet
        return None

    async def fetch_tweet(self, url: str) -> Tweet:
        tweet_path = extract_tweet_path(url)
        if not tweet_path:
            raise self._fail(f"Could not extract tweet path from URL: {url}")

        logger.info(f"[{self.name}] Fetching tweet: {tweet_path}")
        tweet = await self._from_oembed(tweet_path) or await self._from_nitter(tweet_path)
        if tweet is None:
            raise self._fail(f"Could not fetch tweet data for: {tweet_path}")
        return tweet

    async def build_card(self, url: str, title: Optional[str] = None) -> str:
        tweet = await self.fetch_tweet(url)
        logger.info(f"[{self.name}] Generating image for tweet by {tweet.username}")
        return tweet_card(tweet.full_name, tweet.username, tweet.text, tweet.avatar_url)
