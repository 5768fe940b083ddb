"""
Extraction Module
Reading-view extraction and the escalation heuristic
"""
from .static import extract, html_to_text
from .heuristics import (
    MIN_TEXT_LENGTH,
    BOT_PROTECTION_MARKERS,
    BROWSER_PREFERRED_DOMAINS,
    escalation_reason,
    find_marker,
    looks_like_challenge,
    needs_escalation,
    prefers_browser,
    readable_hostname,
)

__all__ = [
    "extract",
    "html_to_text",
    "MIN_TEXT_LENGTH",
    "BOT_PROTECTION_MARKERS",
    "BROWSER_PREFERRED_DOMAINS",
    "escalation_reason",
    "find_marker",
    "looks_like_challenge",
    "needs_escalation",
    "prefers_browser",
    "readable_hostname",
]
