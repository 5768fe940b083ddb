"""
Browser Renderer
Loads pages in a real headless Chromium for client-rendered content and captures.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from extraction.heuristics import looks_like_challenge
from utils.exceptions import BotProtectionError, RenderError

from .config import BODY_TEXT_SCRIPT, CLEANUP_SCRIPT, BrowserConfig
from .session import SessionFactory, launch_session


logger = logging.getLogger(__name__)


class BrowserRenderer:
    """
    Renders pages and takes screenshots, one isolated session per call.

    Every call launches its own browser through ``session_factory`` and tears
    it down on every exit path, so nothing leaks between stories.
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        session_factory: SessionFactory = launch_session,
    ):
        self.config = config or BrowserConfig.from_settings()
        self._session_factory = session_factory

    async def _navigate(self, page: Page, url: str) -> None:
        """Wait for network idle; only on timeout fall back to DOM-ready."""
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.config.navigation_timeout_ms)
        except PlaywrightTimeoutError:
            logger.warning(f"[Browser] Network idle timeout for {url}, retrying with DOM-ready")
            await page.goto(url, wait_until="domcontentloaded", timeout=self.config.dom_ready_timeout_ms)

    async def _settle(self) -> None:
        if self.config.settle_delay_ms > 0:
            await asyncio.sleep(self.config.settle_delay_ms / 1000)

    async def _ensure_not_blocked(self, page: Page, url: str) -> None:
        body_text = await page.evaluate(BODY_TEXT_SCRIPT)
        if looks_like_challenge(body_text, min_text_length=self.config.min_text_length):
            logger.warning(f"[Browser] Bot protection or empty page detected for {url}")
            raise BotProtectionError(f"Bot protection detected for {url}", url=url)

    async def _hide_overlays(self, page: Page, url: str) -> None:
        try:
            await page.add_style_tag(content=self.config.hide_css)
            await page.evaluate(CLEANUP_SCRIPT)
        except PlaywrightError as e:
            # Strict CSP pages reject injected styles; capture anyway
            logger.warning(f"[Browser] Could not hide overlays on {url}: {e}")

    async def render(self, url: str) -> str:
        """
        Load a URL and return the fully rendered HTML.

        Raises:
            BotProtectionError: the rendered page is a challenge or near-empty
            RenderError: launch or navigation failed
        """
        logger.info(f"[Browser] Rendering {url}")
        try:
            async with self._session_factory(self.config) as page:
                await self._navigate(page, url)
                await self._settle()
                await self._ensure_not_blocked(page, url)
                html = await page.content()
        except PlaywrightError as e:
            raise RenderError(f"Failed to render {url}: {e}", url=url) from e

        logger.info(f"[Browser] Rendered {url} ({len(html)} chars)")
        return html

    async def capture(self, url: str, path: Union[str, Path]) -> Path:
        """
        Screenshot a URL's viewport to a PNG at ``path``.

        Raises:
            BotProtectionError: the page is a challenge or near-empty
            RenderError: launch, navigation or screenshot failed
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"[Browser] Capturing {url}")
        try:
            async with self._session_factory(self.config) as page:
                await self._navigate(page, url)
                await self._settle()
                try:
                    await page.wait_for_selector("article", timeout=self.config.article_wait_ms)
                except PlaywrightTimeoutError:
                    logger.debug(f"[Browser] No <article> on {url}, capturing as-is")
                await self._ensure_not_blocked(page, url)
                await self._hide_overlays(page, url)
                await page.screenshot(path=str(path), type="png")
        except PlaywrightError as e:
            raise RenderError(f"Failed to capture {url}: {e}", url=url) from e

        logger.info(f"[Browser] Saved screenshot to {path}")
        return path

    async def capture_html(self, html: str, path: Union[str, Path]) -> Path:
        """Render a self-contained HTML document and screenshot it."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with self._session_factory(self.config) as page:
                await page.set_content(html, wait_until="networkidle", timeout=self.config.dom_ready_timeout_ms)
                await page.screenshot(path=str(path), type="png")
        except PlaywrightError as e:
            raise RenderError(f"Failed to render HTML card: {e}") from e

        logger.info(f"[Browser] Saved rendered card to {path}")
        return path
