"""
Scrapers Module
"""
from .base import BaseScraper, RateLimitedScraper
from .hackernews_scraper import HackerNewsScraper, NOISE_PATTERN

__all__ = [
    # Base
    "BaseScraper",
    "RateLimitedScraper",
    # Hacker News
    "HackerNewsScraper",
    "NOISE_PATTERN",
]
