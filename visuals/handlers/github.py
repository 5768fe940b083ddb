"""
GitHub Handler
Renders the repository's social preview image
"""
import logging
import re
from typing import Optional

from utils.exceptions import FetchError
from visuals.cards import preview_image_card

from .base import DomainHandler


logger = logging.getLogger(__name__)

_OG_IMAGE = re.compile(r'<meta\s+property="og:image"\s+content="([^"]+)"', re.IGNORECASE)


def extract_og_image(html: str) -> Optional[str]:
    match = _OG_IMAGE.search(html or "")
    return match.group(1) if match else None


class GitHubHandler(DomainHandler):
    """Code-repository pages on github.com"""

    @property
    def name(self) -> str:
        return "GitHub"

    async def build_card(self, url: str, title: Optional[str] = None) -> str:
        logger.info(f"[{self.name}] Fetching og:image for: {url}")
        try:
            response = await self.fetcher.fetch(
                url,
                timeout=self.settings.metadata_timeout_seconds,
                max_attempts=1,
            )
        except FetchError as e:
            raise self._fail(f"Could not fetch {url}: {e}") from e

        if not response.is_success:
            raise self._fail(f"{url} returned {response.status_code}")

        image_url = extract_og_image(response.text)
        if not image_url:
            raise self._fail(f"Could not extract og:image from URL: {url}")

        logger.info(f"[{self.name}] Generating image with og:image: {image_url}")
        return preview_image_card(image_url)
