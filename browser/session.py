"""Isolated Playwright sessions, one per browser operation."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncContextManager, AsyncIterator, Callable
from urllib.parse import urlparse

from playwright.async_api import Page, Route, async_playwright

from .config import STEALTH_INIT_SCRIPT, BrowserConfig


logger = logging.getLogger(__name__)

SessionFactory = Callable[[BrowserConfig], AsyncContextManager[Page]]


def _request_filter(config: BrowserConfig):
    async def _handle(route: Route) -> None:
        hostname = urlparse(route.request.url).hostname or ""
        if config.is_blocked_host(hostname):
            await route.abort()
            return
        await route.continue_()

    return _handle


@asynccontextmanager
async def launch_session(config: BrowserConfig) -> AsyncIterator[Page]:
    """
    Launch a fresh Chromium, yield a configured page, always tear it down.

    No cookies or storage survive between sessions.
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=config.headless,
            args=list(config.launch_args),
        )
        try:
            context = await browser.new_context(
                viewport={"width": config.viewport_width, "height": config.viewport_height},
                device_scale_factor=config.device_scale_factor,
                user_agent=config.user_agent,
                locale="en-US",
            )
            await context.add_init_script(STEALTH_INIT_SCRIPT)
            if config.block_trackers:
                await context.route("**/*", _request_filter(config))
            page = await context.new_page()
            yield page
        finally:
            await browser.close()
            logger.debug("[Browser] Session closed")
