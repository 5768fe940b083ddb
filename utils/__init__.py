"""
Utils Module
Logging and error types
"""
from .logger import setup_logger
from .exceptions import (
    RecapError,
    ConfigurationError,
    StorageError,
    CacheError,
    ScraperError,
    FetchError,
    ExtractionError,
    RenderError,
    BotProtectionError,
    DomainHandlerError,
    InsufficientStoriesError,
)

__all__ = [
    "setup_logger",
    "RecapError",
    "ConfigurationError",
    "StorageError",
    "CacheError",
    "ScraperError",
    "FetchError",
    "ExtractionError",
    "RenderError",
    "BotProtectionError",
    "DomainHandlerError",
    "InsufficientStoriesError",
]
