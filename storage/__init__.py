"""
Storage Module
Cache store, cache keys and the covered-story ledger
"""
from .cache import CacheStore, get_cache
from .covered import CoveredStoryLedger, prune_expired, covered_ids, is_expired
from .keys import (
    COVERED_STORIES_KEY,
    story_key,
    screenshot_key,
    summary_key,
    intro_key,
    title_key,
)

__all__ = [
    # Cache
    "CacheStore",
    "get_cache",
    # Covered stories
    "CoveredStoryLedger",
    "prune_expired",
    "covered_ids",
    "is_expired",
    # Keys
    "COVERED_STORIES_KEY",
    "story_key",
    "screenshot_key",
    "summary_key",
    "intro_key",
    "title_key",
]
