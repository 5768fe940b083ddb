"""
Settings Configuration
Pydantic-based configuration loaded from the environment / .env
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


_FALSEY = {"", "0", "false", "no", "off"}


def _truthy_flag(value: Any) -> bool:
    """Any non-empty value other than an explicit false string enables a toggle."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() not in _FALSEY


class RuntimeSettings(BaseSettings):
    """Environment toggles (no prefix: DEBUG, CI)"""
    debug: bool = Field(default=False, description="Verbose debug logging")
    ci: bool = Field(default=False, description="Running in the scheduled CI job; gates covered-story persistence")
    
    @field_validator("debug", "ci", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> bool:
        return _truthy_flag(value)


class FetchSettings(BaseSettings):
    """Bounded fetcher configuration"""
    timeout_seconds: float = Field(default=5.0, description="Per-attempt timeout (seconds)")
    max_attempts: int = Field(default=3, description="Attempts before giving up")
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; HNRecap/1.0)",
        description="User-Agent sent with plain fetches",
    )
    
    class Config:
        env_prefix = "FETCH_"


class ExtractionSettings(BaseSettings):
    """Static extraction / escalation heuristic"""
    min_text_length: int = Field(default=200, description="Extracted text shorter than this escalates")
    
    class Config:
        env_prefix = "EXTRACTION_"


class BrowserSettings(BaseSettings):
    """Headless browser configuration"""
    headless: bool = Field(default=True, description="Run Chromium headless")
    navigation_timeout_ms: int = Field(default=15000, description="Network-idle navigation timeout")
    dom_ready_timeout_ms: int = Field(default=30000, description="DOM-ready retry timeout")
    settle_delay_ms: int = Field(default=2000, description="Extra wait for client-rendered pages")
    article_wait_ms: int = Field(default=5000, description="Max wait for an <article> before capture")
    viewport_width: int = Field(default=1920)
    viewport_height: int = Field(default=1080)
    device_scale_factor: float = Field(default=3, description="Pixel density of captures")
    
    class Config:
        env_prefix = "BROWSER_"


class HandlerSettings(BaseSettings):
    """Domain handler configuration"""
    metadata_timeout_seconds: float = Field(default=10.0, description="oEmbed / og:image fetch timeout")
    thumbnail_timeout_seconds: float = Field(default=5.0, description="YouTube thumbnail HEAD check timeout")
    nitter_instances: List[str] = Field(
        default_factory=lambda: ["nitter.net", "nitter.privacydev.net", "nitter.poast.org"],
        description="Nitter mirrors tried in order",
    )
    
    class Config:
        env_prefix = "HANDLER_"


class HackerNewsSettings(BaseSettings):
    """Hacker News discovery"""
    story_count: int = Field(default=10, description="Stories per episode")
    overfetch_margin: int = Field(default=10, description="Extra candidates fetched to absorb filtering")
    covered_retention_hours: int = Field(default=36, description="How long a covered story stays excluded")
    requests_per_second: float = Field(default=5.0, description="Item API request rate")
    
    class Config:
        env_prefix = "HACKERNEWS_"


class StorageSettings(BaseSettings):
    """Storage configuration"""
    cache_path: str = Field(default="./cache", description="Cache directory")
    
    class Config:
        env_prefix = "STORAGE_"


class Settings(BaseSettings):
    """Root settings aggregating every section"""
    
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    handlers: HandlerSettings = Field(default_factory=HandlerSettings)
    hackernews: HackerNewsSettings = Field(default_factory=HackerNewsSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
    
    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading the given .env file (default config/.env) first"""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"
        
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
        
        return cls(
            runtime=RuntimeSettings(),
            fetch=FetchSettings(),
            extraction=ExtractionSettings(),
            browser=BrowserSettings(),
            handlers=HandlerSettings(),
            hackernews=HackerNewsSettings(),
            storage=StorageSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Global settings singleton"""
    return Settings.load_from_env_file()
