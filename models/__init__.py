"""
Data Models
"""
from .schemas import (
    Story,
    Comment,
    ExtractedContent,
    CoveredStory,
    ContentMethod,
    CaptureOrigin,
    AcquiredContent,
    VisualCapture,
    AcquiredStory,
)

__all__ = [
    "Story",
    "Comment",
    "ExtractedContent",
    "CoveredStory",
    "ContentMethod",
    "CaptureOrigin",
    "AcquiredContent",
    "VisualCapture",
    "AcquiredStory",
]
