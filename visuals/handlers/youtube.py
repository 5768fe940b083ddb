"""
YouTube Handler
Renders the video thumbnail, captioned from oEmbed or else the story title
"""
import logging
import re
from typing import Optional

import httpx

from utils.exceptions import FetchError
from visuals.cards import thumbnail_card

from .base import DomainHandler


logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/{variant}.jpg"

_VIDEO_ID_PATTERNS = (
    re.compile(r"youtube\.com/watch\?(?:[^#]*&)?v=([^&#]+)"),
    re.compile(r"youtu\.be/([^?&#/]+)"),
    re.compile(r"youtube\.com/embed/([^?&#/]+)"),
)


def extract_video_id(url: str) -> Optional[str]:
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


class YouTubeHandler(DomainHandler):
    """Video watch pages on youtube.com / youtu.be"""

    @property
    def name(self) -> str:
        return "YouTube"

    async def best_thumbnail_url(self, video_id: str) -> str:
        """maxresdefault when it exists, else hqdefault (always present)."""
        maxres = THUMBNAIL_URL.format(video_id=video_id, variant="maxresdefault")
        try:
            response = await self.fetcher.fetch(
                maxres,
                method="HEAD",
                timeout=self.settings.thumbnail_timeout_seconds,
                max_attempts=1,
            )
            if response.is_success:
                return maxres
        except FetchError as e:
            logger.debug(f"[{self.name}] Thumbnail check failed for {video_id}: {e}")
        return THUMBNAIL_URL.format(video_id=video_id, variant="hqdefault")

    async def fetch_title(self, url: str) -> Optional[str]:
        try:
            payload = await self.fetcher.fetch_json(
                OEMBED_URL,
                params={"url": url, "format": "json"},
                timeout=self.settings.metadata_timeout_seconds,
                max_attempts=1,
            )
        except (FetchError, httpx.HTTPError, ValueError) as e:
            logger.info(f"[{self.name}] oEmbed unavailable for {url}: {e}")
            return None
        if not isinstance(payload, dict):
            return None
        return payload.get("title") or None

    async def build_card(self, url: str, title: Optional[str] = None) -> str:
        video_id = extract_video_id(url)
        if not video_id:
            raise self._fail(f"Could not extract video ID from URL: {url}")

        logger.info(f"[{self.name}] Generating image for video: {video_id}")
        thumbnail_url = await self.best_thumbnail_url(video_id)
        caption = await self.fetch_title(url) or title
        return thumbnail_card(thumbnail_url, caption)
