"""
Data Models / Schemas
Shared data structures of the acquisition engine
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


HN_ITEM_URL = "https://news.ycombinator.com/item?id={story_id}"


class Story(BaseModel):
    """A discovered story; immutable once fetched"""
    story_id: int = Field(..., description="Hacker News item id")
    title: str = Field(..., description="Title")
    url: Optional[str] = Field(None, description="External link, None for text-only posts")
    raw_text: Optional[str] = Field(None, description="Self-text of Ask HN style posts")
    points: int = Field(default=0, description="Score")
    discussion_url: str = Field(..., description="HN discussion link")
    
    class Config:
        frozen = True
    
    @classmethod
    def discussion_url_for(cls, story_id: int) -> str:
        return HN_ITEM_URL.format(story_id=story_id)


class Comment(BaseModel):
    """One node of a comment tree"""
    id: int
    author: Optional[str] = None
    text: Optional[str] = None
    created_at: Optional[str] = None
    children: List["Comment"] = Field(default_factory=list)


Comment.model_rebuild()


class ExtractedContent(BaseModel):
    """Readable view of a document"""
    text: str = Field(..., description="Main text")
    title: Optional[str] = Field(None, description="Document title")
    byline: Optional[str] = Field(None, description="Author line")
    excerpt: Optional[str] = Field(None, description="Short description")
    site_name: Optional[str] = Field(None, description="Publisher name")


class CoveredStory(BaseModel):
    """A story that went out in a previous batch"""
    id: int
    covered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ContentMethod(str, Enum):
    """Which text stage produced the content"""
    SELF_TEXT = "self_text"
    CACHE = "cache"
    STATIC = "static"
    BROWSER = "browser"
    PDF = "pdf"
    PLACEHOLDER = "placeholder"


class CaptureOrigin(str, Enum):
    """Which visual stage produced the capture"""
    CACHE = "cache"
    DOMAIN_HANDLER = "domain_handler"
    BROWSER = "browser"
    FALLBACK = "fallback"


class AcquiredContent(BaseModel):
    """Outcome of the text cascade for one story"""
    content: ExtractedContent
    source: str = Field(..., description="Site name, byline or readable hostname")
    method: ContentMethod


class VisualCapture(BaseModel):
    """Rendered image for a story"""
    story_id: int
    path: Path
    origin: CaptureOrigin


class AcquiredStory(BaseModel):
    """A story together with everything acquired for it"""
    story: Story
    content: AcquiredContent
    comments: List[Comment] = Field(default_factory=list)
    capture: Optional[VisualCapture] = None
    
    @property
    def text(self) -> str:
        return self.content.content.text
