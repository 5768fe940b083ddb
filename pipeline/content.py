"""
Content Acquirer
Cache -> static fetch -> browser render text cascade for one story
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import List, Optional

from browser import BrowserRenderer
from config import get_settings
from core.cascade import Stage, run_cascade
from extraction import (
    escalation_reason,
    extract,
    prefers_browser,
    readable_hostname,
)
from fetching import BoundedFetcher, extract_pdf_text, pdf_source_url
from models import AcquiredContent, ContentMethod, ExtractedContent, Story
from storage import CacheStore, story_key
from utils.exceptions import CacheError


logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No content found for this story"
HN_SOURCE = "Hacker News"

# "Site Name - Section", "Author | Publication", ...
_SOURCE_SEPARATOR = re.compile(r"\s[-\\|<>]")


@dataclass(frozen=True)
class _Page:
    html: str
    extracted: Optional[ExtractedContent]


def derive_source(story: Story, extracted: Optional[ExtractedContent]) -> str:
    """Human-readable source label: site name, byline, else hostname."""
    if not story.url:
        return HN_SOURCE
    label = None
    if extracted is not None:
        label = extracted.site_name or extracted.byline
    if label:
        label = _SOURCE_SEPARATOR.split(label, 1)[0].strip()
    if not label or label == story.title:
        label = readable_hostname(story.url)
    return label or HN_SOURCE


class ContentAcquirer:
    """
    Produces text for every story, whatever happens on the network.

    Raw HTML of an accepted static or browser result is cached under
    ``story-<id>`` so later runs skip the network entirely.
    """

    def __init__(
        self,
        fetcher: BoundedFetcher,
        cache: CacheStore,
        renderer: BrowserRenderer,
        min_text_length: Optional[int] = None,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.renderer = renderer
        self.min_text_length = (
            min_text_length if min_text_length is not None else get_settings().extraction.min_text_length
        )

    def _store(self, key: str, payload: str) -> None:
        try:
            self.cache.write(key, payload)
        except CacheError as e:
            logger.warning(f"[Cache] Could not store {key}: {e}")

    def _is_sufficient(self, page: _Page) -> bool:
        reason = escalation_reason(page.html, page.extracted, min_text_length=self.min_text_length)
        if reason:
            logger.info(f"[Extract] Static result insufficient: {reason}")
            return False
        return True

    def _html_stages(self, story: Story, partial: List[ExtractedContent]) -> List[Stage[_Page]]:
        url = story.url
        key = story_key(story.story_id)

        async def from_cache() -> Optional[_Page]:
            html = self.cache.read(key)
            if html is None:
                return None
            return _Page(html, extract(html))

        async def from_static() -> _Page:
            html = await self.fetcher.fetch_text(url)
            page = _Page(html, extract(html))
            if page.extracted is not None:
                partial.append(page.extracted)
            return page

        async def from_browser() -> _Page:
            html = await self.renderer.render(url)
            return _Page(html, extract(html))

        stages: List[Stage[_Page]] = [Stage("cache", from_cache, lambda page: page.extracted is not None)]
        if prefers_browser(url):
            logger.info(f"[Extract] {readable_hostname(url)} prefers the browser, skipping static fetch")
        else:
            stages.append(Stage("static", from_static, self._is_sufficient))
        stages.append(Stage("browser", from_browser, lambda page: page.extracted is not None))
        return stages

    def _pdf_stages(self, story: Story, pdf_url: str) -> List[Stage[ExtractedContent]]:
        key = story_key(story.story_id)

        async def from_cache() -> Optional[ExtractedContent]:
            text = self.cache.read(key)
            return ExtractedContent(text=text, title=story.title) if text and text.strip() else None

        async def from_pdf() -> ExtractedContent:
            payload = await self.fetcher.fetch_bytes(pdf_url)
            text = extract_pdf_text(payload)
            if text.strip():
                self._store(key, text)
            else:
                logger.info(f"[Extract] PDF for story {story.story_id} has no text layer")
            return ExtractedContent(text=text, title=story.title)

        return [
            Stage("cache", from_cache),
            Stage("pdf", from_pdf, lambda content: bool(content.text.strip())),
        ]

    def _placeholder(self, story: Story) -> AcquiredContent:
        return AcquiredContent(
            content=ExtractedContent(text=PLACEHOLDER_TEXT, title=story.title),
            source=derive_source(story, None),
            method=ContentMethod.PLACEHOLDER,
        )

    async def acquire(self, story: Story) -> AcquiredContent:
        """Never raises for network, extraction or browser failures."""
        label = f"Story {story.story_id}"

        if not story.url and story.raw_text:
            return AcquiredContent(
                content=ExtractedContent(text=story.raw_text, title=story.title),
                source=HN_SOURCE,
                method=ContentMethod.SELF_TEXT,
            )

        if not story.url:
            logger.warning(f"[Extract] {label} has neither text nor URL")
            return self._placeholder(story)

        pdf_url = pdf_source_url(story.url)
        if pdf_url:
            logger.info(f"[Extract] {label} is a PDF: {pdf_url}")
            result = await run_cascade(self._pdf_stages(story, pdf_url), label=label)
            if result.succeeded:
                method = ContentMethod.CACHE if result.stage == "cache" else ContentMethod.PDF
                return AcquiredContent(content=result.value, source=derive_source(story, None), method=method)
            return self._placeholder(story)

        partial: List[ExtractedContent] = []
        result = await run_cascade(self._html_stages(story, partial), label=label)

        if result.succeeded:
            page = result.value
            if result.stage != "cache":
                self._store(story_key(story.story_id), page.html)
            return AcquiredContent(
                content=page.extracted,
                source=derive_source(story, page.extracted),
                method=ContentMethod(result.stage),
            )

        if result.blocked:
            logger.warning(f"[Extract] {label} is behind bot protection")
        if partial:
            logger.warning(f"[Extract] {label}: keeping short static extraction")
            return AcquiredContent(
                content=partial[-1],
                source=derive_source(story, partial[-1]),
                method=ContentMethod.STATIC,
            )
        return self._placeholder(story)
