"""Deterministic cache keys derived from story identity."""

from __future__ import annotations

import hashlib
from typing import Iterable

COVERED_STORIES_KEY = "covered-stories"


def story_key(story_id: int) -> str:
    """Raw HTML (or decoded PDF text) of a story."""
    return f"story-{story_id}"


def screenshot_key(story_id: int) -> str:
    return f"screenshot-{story_id}.png"


def summary_key(story_id: int) -> str:
    return f"summary-{story_id}"


def _ids_hash(story_ids: Iterable[int]) -> str:
    joined = ",".join(str(story_id) for story_id in story_ids)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:6]


def intro_key(story_ids: Iterable[int]) -> str:
    """Episode intro, keyed by every story in the episode."""
    return f"intro-{_ids_hash(story_ids)}"


def title_key(story_ids: Iterable[int]) -> str:
    """Episode title, keyed by the first three stories only."""
    return f"title-{_ids_hash(list(story_ids)[:3])}"
