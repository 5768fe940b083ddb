"""
Browser Module
Headless Chromium rendering and screenshot capture
"""
from .config import BrowserConfig, HIDE_ELEMENTS_CSS, BLOCKED_HOSTS
from .session import SessionFactory, launch_session
from .renderer import BrowserRenderer

__all__ = [
    "BrowserConfig",
    "HIDE_ELEMENTS_CSS",
    "BLOCKED_HOSTS",
    "SessionFactory",
    "launch_session",
    "BrowserRenderer",
]
