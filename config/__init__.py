"""
Configuration Management Module
"""
from .settings import (
    Settings,
    RuntimeSettings,
    FetchSettings,
    ExtractionSettings,
    BrowserSettings,
    HandlerSettings,
    HackerNewsSettings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "RuntimeSettings",
    "FetchSettings",
    "ExtractionSettings",
    "BrowserSettings",
    "HandlerSettings",
    "HackerNewsSettings",
    "StorageSettings",
    "get_settings",
]
