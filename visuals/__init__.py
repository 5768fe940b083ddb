"""
Visuals Module
Per-story images: domain handlers, generic capture and the fallback card
"""
from .cards import escape_html, truncate_text
from .handlers import DomainRouter, DomainHandler
from .fallback import FallbackImageGenerator
from .screenshots import VisualAcquirer

__all__ = [
    "escape_html",
    "truncate_text",
    "DomainRouter",
    "DomainHandler",
    "FallbackImageGenerator",
    "VisualAcquirer",
]
