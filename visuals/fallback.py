"""
Fallback Image Generator
Terminal node of the visual cascade: a site-icon + title card that always succeeds
"""
from __future__ import annotations

import base64
from io import BytesIO
import logging
from pathlib import Path
import textwrap
from typing import Optional, Tuple
from urllib.parse import quote

import httpx
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from browser import BrowserRenderer
from fetching import BoundedFetcher
from storage import CacheStore, screenshot_key
from utils.exceptions import FetchError, RenderError

from .cards import CARD_HEIGHT, CARD_WIDTH, PLACEHOLDER_ICON_SVG, fallback_card


logger = logging.getLogger(__name__)

FAVICON_URL = "https://www.google.com/s2/favicons?domain={domain}&sz=128"

_BACKGROUND = (26, 26, 26)
_TITLE_COLOR = (255, 255, 255)
_SOURCE_COLOR = (136, 136, 136)
_ICON_SIZE = 128


def _data_uri(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


PLACEHOLDER_ICON_URI = _data_uri(PLACEHOLDER_ICON_SVG.encode("utf-8"), "image/svg+xml")


def _load_font(size: int) -> ImageFont.ImageFont:
    for font_path in ("DejaVuSans-Bold.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", "arial.ttf"):
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


class FallbackImageGenerator:
    """
    Builds the last-resort card for a story.

    Tries the HTML card through the browser first; when the browser itself is
    unavailable the card is drawn directly with Pillow. A missing site icon
    degrades to a neutral placeholder.
    """

    def __init__(self, fetcher: BoundedFetcher, renderer: BrowserRenderer, cache: CacheStore):
        self.fetcher = fetcher
        self.renderer = renderer
        self.cache = cache

    async def _fetch_icon(self, source_domain: str) -> Optional[Tuple[bytes, str]]:
        url = FAVICON_URL.format(domain=quote(source_domain or "", safe=""))
        try:
            response = await self.fetcher.fetch(url, max_attempts=1)
        except (FetchError, httpx.HTTPError) as e:
            logger.info(f"[Fallback] Site icon unavailable for {source_domain}: {e}")
            return None
        if not response.is_success or not response.content:
            logger.info(f"[Fallback] Site icon unavailable for {source_domain}: HTTP {response.status_code}")
            return None
        content_type = response.headers.get("content-type", "image/png").split(";")[0].strip()
        return response.content, content_type

    def _draw(self, title: str, source_domain: str, icon: Optional[bytes], path: Path) -> Path:
        image = Image.new("RGB", (CARD_WIDTH, CARD_HEIGHT), color=_BACKGROUND)
        draw = ImageDraw.Draw(image)
        title_font = _load_font(48)
        source_font = _load_font(32)

        lines = textwrap.wrap(title or "", width=60)[:4]
        line_height = 62
        block_height = _ICON_SIZE + 32 + line_height * len(lines) + 24 + 40
        y = (CARD_HEIGHT - block_height) // 2

        icon_image = None
        if icon:
            try:
                icon_image = Image.open(BytesIO(icon)).convert("RGBA")
                icon_image = icon_image.resize((_ICON_SIZE, _ICON_SIZE), Image.Resampling.LANCZOS)
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
                logger.info(f"[Fallback] Unusable site icon for {source_domain}: {e}")
                icon_image = None
        if icon_image is not None:
            image.paste(icon_image, ((CARD_WIDTH - _ICON_SIZE) // 2, y), icon_image)
        else:
            left = (CARD_WIDTH - _ICON_SIZE) // 2
            draw.rounded_rectangle((left, y, left + _ICON_SIZE, y + _ICON_SIZE), radius=16, fill=(51, 51, 51))
        y += _ICON_SIZE + 32

        def centered(text: str, top: int, font, fill) -> None:
            width = draw.textlength(text, font=font)
            draw.text(((CARD_WIDTH - width) / 2, top), text, font=font, fill=fill)

        for line in lines:
            centered(line, y, title_font, _TITLE_COLOR)
            y += line_height
        centered(source_domain or "", y + 24, source_font, _SOURCE_COLOR)

        image.save(path, format="PNG")
        return path

    async def generate(self, title: str, source_domain: str, story_id: int) -> Path:
        """
        Produce a card image for the story.

        Network and browser failures never escape; only an unwritable cache
        directory can make this fail.
        """
        path = self.cache.path(screenshot_key(story_id))
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"[Fallback] Generating fallback image for: {title}")

        icon = await self._fetch_icon(source_domain)
        icon_src = _data_uri(*icon) if icon else PLACEHOLDER_ICON_URI

        try:
            return await self.renderer.capture_html(fallback_card(title, source_domain, icon_src), path)
        except RenderError as e:
            logger.warning(f"[Fallback] Browser unavailable, drawing card directly: {e}")

        return self._draw(title, source_domain, icon[0] if icon else None, path)
