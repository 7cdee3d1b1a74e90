"""
Core configuration module for environment variables and settings management.

Design choices:
- Uses python-dotenv to load environment variables from a .env file when present.
- Plain pydantic BaseModel instead of BaseSettings; values are read explicitly in get_settings().
- Provides a single get_settings() accessor with LRU caching to avoid repeated parsing.
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    environment: str = "dev"

    # Content locations
    content_dir: str = "data"
    output_dir: str = "out"

    # Public site identity used for SEO, sitemap and robots
    site_url: str = "https://abmind.org"
    site_name: str = "ABMind Course Portal"

    # External link checks (single attempt, no retries)
    link_check_timeout: float = 10.0
    link_check_concurrency: int = 10

    # Search / relationships
    search_debounce_ms: int = 300
    related_courses_limit: int = 5

    # Uptime monitor
    monitor_urls: List[str] = Field(default_factory=list)
    monitor_log_dir: str = "logs"

    log_level: str = "INFO"

    # API versioning (useful for mounting routers and future deprecations)
    api_v1_prefix: str = "/api/v1"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("prod", "production")


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load environment variables (from .env if present) and build a Settings object.

    This function is cached so app startup and repeated imports are efficient.
    """
    load_dotenv()  # no-op if .env not present
    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        content_dir=os.getenv("CONTENT_DIR", "data"),
        output_dir=os.getenv("OUTPUT_DIR", "out"),
        site_url=os.getenv("SITE_URL", "https://abmind.org").rstrip("/"),
        site_name=os.getenv("SITE_NAME", "ABMind Course Portal"),
        link_check_timeout=float(os.getenv("LINK_CHECK_TIMEOUT", "10")),
        link_check_concurrency=int(os.getenv("LINK_CHECK_CONCURRENCY", "10")),
        search_debounce_ms=int(os.getenv("SEARCH_DEBOUNCE_MS", "300")),
        related_courses_limit=int(os.getenv("RELATED_COURSES_LIMIT", "5")),
        monitor_urls=_split_list(os.getenv("MONITOR_URLS", "https://abmind.org")),
        monitor_log_dir=os.getenv("MONITOR_LOG_DIR", "logs"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        api_v1_prefix=os.getenv("API_V1_PREFIX", "/api/v1"),
    )
