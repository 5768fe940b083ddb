"""
Extraction-quality heuristic.

Decides whether a static extraction is good enough or the story must be
rendered in a browser. The length threshold and the marker lists below are
the tuning knobs of the whole text cascade.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple
from urllib.parse import urlparse

from models import ExtractedContent

MIN_TEXT_LENGTH = 200

# Client-rendered apps whose server HTML is an empty mount point
EMPTY_SHELL_MARKERS: Tuple[str, ...] = (
    '<div id="root"></div>',
    '<div id="app"></div>',
    '<div id="__next"></div>',
    '<div id="__nuxt"></div>',
    '<div id="svelte"></div>',
    "<app-root></app-root>",
)

SCRIPT_REQUIRED_MARKERS: Tuple[str, ...] = (
    "enable javascript",
    "javascript is required",
    "javascript is disabled",
    "requires javascript",
    "turn on javascript",
)

CHALLENGE_MARKERS: Tuple[str, ...] = (
    "checking your browser",
    "just a moment",
    "verifying",
    "verify you are human",
    "please wait",
    "validation required",
    "access denied",
    "ray id",
    "cf-browser-verification",
    "challenge-platform",
    "captcha-delivery",
)

# Shared with the browser renderer's post-render check
BOT_PROTECTION_MARKERS: Tuple[str, ...] = SCRIPT_REQUIRED_MARKERS + CHALLENGE_MARKERS

# Known SPAs / bot-protected sites where a plain fetch is wasted work
BROWSER_PREFERRED_DOMAINS = frozenset(
    {
        "antirez.com",
        "bloomberg.com",
        "bsky.app",
        "codepen.io",
        "crates.io",
        "economist.com",
        "finance.yahoo.com",
        "mastodon.gamedev.place",
        "mastodon.online",
        "mastodon.social",
        "mathstodon.xyz",
        "nature.com",
        "neal.fun",
        "netflixtechblog.com",
        "nytimes.com",
        "reuters.com",
        "science.org",
        "smithsonianmag.com",
        "theglobeandmail.com",
        "twitter.com",
        "washingtonpost.com",
        "wsj.com",
        "x.com",
    }
)

_BETWEEN_TAGS = re.compile(r">\s+<")


def _compact(html: str) -> str:
    return _BETWEEN_TAGS.sub("><", html.lower())


def find_marker(html: str) -> Optional[str]:
    """Return the first empty-shell, script-required or challenge marker in raw HTML."""
    if not html:
        return None
    compact = _compact(html)
    for marker in EMPTY_SHELL_MARKERS:
        if marker in compact:
            return marker
    for marker in BOT_PROTECTION_MARKERS:
        if marker in compact:
            return marker
    return None


def escalation_reason(
    html: str,
    extracted: Optional[ExtractedContent],
    *,
    min_text_length: int = MIN_TEXT_LENGTH,
) -> Optional[str]:
    """Why the static result is insufficient, or None when it is good enough."""
    if extracted is None:
        return "no main content found"
    length = len(extracted.text.strip())
    if length < min_text_length:
        return f"extracted text too short ({length} < {min_text_length} chars)"
    marker = find_marker(html)
    if marker:
        return f"page contains marker {marker!r}"
    return None


def needs_escalation(
    html: str,
    extracted: Optional[ExtractedContent],
    *,
    min_text_length: int = MIN_TEXT_LENGTH,
) -> bool:
    return escalation_reason(html, extracted, min_text_length=min_text_length) is not None


def looks_like_challenge(body_text: str, *, min_text_length: int = MIN_TEXT_LENGTH) -> bool:
    """Post-render check on the visible text of a page."""
    text = (body_text or "").strip().lower()
    if len(text) < min_text_length:
        return True
    return any(marker in text for marker in BOT_PROTECTION_MARKERS)


def readable_hostname(url: str) -> str:
    hostname = urlparse(url).hostname or ""
    return hostname[4:] if hostname.startswith("www.") else hostname


def prefers_browser(url: Optional[str]) -> bool:
    """Whether to skip the static fetch and render straight away."""
    if not url:
        return False
    hostname = urlparse(url).hostname or ""
    if readable_hostname(url) in BROWSER_PREFERRED_DOMAINS:
        return True
    return "mastodon." in hostname or hostname.endswith(".social")
