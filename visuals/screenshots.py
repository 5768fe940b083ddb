"""
Visual Acquirer
Cache -> domain handler -> generic capture -> fallback card, per story
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from browser import BrowserRenderer
from core.cascade import Stage, run_cascade
from extraction.heuristics import readable_hostname
from models import CaptureOrigin, Story, VisualCapture
from storage import CacheStore, screenshot_key

from .fallback import FallbackImageGenerator
from .handlers import DomainRouter


logger = logging.getLogger(__name__)

HN_HOSTNAME = "news.ycombinator.com"

_ORIGINS = {
    "cache": CaptureOrigin.CACHE,
    "browser": CaptureOrigin.BROWSER,
}


class VisualAcquirer:
    """Produces exactly one image per story; the fallback card is terminal."""

    def __init__(
        self,
        cache: CacheStore,
        renderer: BrowserRenderer,
        router: DomainRouter,
        fallback: FallbackImageGenerator,
    ):
        self.cache = cache
        self.renderer = renderer
        self.router = router
        self.fallback = fallback

    def _stages(self, story: Story) -> List[Stage[Path]]:
        key = screenshot_key(story.story_id)
        target = self.cache.path(key)

        async def from_cache() -> Optional[Path]:
            return target if self.cache.exists(key) else None

        stages: List[Stage[Path]] = [Stage("cache", from_cache)]
        if not story.url:
            return stages

        url = story.url
        handler = self.router.route(url)
        if handler is not None:
            async def from_handler() -> Path:
                return await handler.produce(url, story.story_id, story.title)

            stages.append(Stage(f"handler:{handler.name}", from_handler))

        async def from_browser() -> Path:
            return await self.renderer.capture(url, target)

        stages.append(Stage("browser", from_browser))
        return stages

    async def acquire(self, story: Story) -> VisualCapture:
        result = await run_cascade(self._stages(story), label=f"Visual {story.story_id}")
        if result.succeeded:
            origin = _ORIGINS.get(result.stage, CaptureOrigin.DOMAIN_HANDLER)
            return VisualCapture(story_id=story.story_id, path=result.value, origin=origin)

        source_domain = readable_hostname(story.url) if story.url else HN_HOSTNAME
        path = await self.fallback.generate(story.title, source_domain or HN_HOSTNAME, story.story_id)
        return VisualCapture(story_id=story.story_id, path=path, origin=CaptureOrigin.FALLBACK)
