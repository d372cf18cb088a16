"""Configuration objects and constants for the scraper."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple
from urllib.parse import urlparse

MODE_SIMPLE = "simple"
MODE_BROWSER = "browser"
MODE_AUTO = "auto"
MODES = (MODE_SIMPLE, MODE_BROWSER, MODE_AUTO)

DEFAULT_USER_AGENT = os.getenv("SCRAPER_USER_AGENT", "Web-Dev-Factory-HQ Bot")
DEFAULT_OUTPUT_DIR = os.getenv("SCRAPER_OUTPUT_DIR", "data/scraped")
DEFAULT_MAX_PAGES = 50
DEFAULT_CONTENT_SELECTOR = 'main, article, [role="main"], body'


class InvalidJobError(ValueError):
    """Raised when a crawl job cannot be started from the given input."""


@dataclass(frozen=True)
class CrawlJob:
    """The unit of work for one scraper run."""

    source_url: str
    mode: str = MODE_AUTO
    max_pages: int = DEFAULT_MAX_PAGES
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise InvalidJobError(
                f"Unknown mode {self.mode!r}; expected one of {', '.join(MODES)}"
            )
        if self.max_pages < 1:
            raise InvalidJobError(f"max_pages must be at least 1 (got {self.max_pages})")
        try:
            parsed = urlparse(self.source_url)
        except ValueError as exc:
            raise InvalidJobError(f"Invalid source URL {self.source_url!r}: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidJobError(
                f"Source URL must be an absolute http(s) URL: {self.source_url!r}"
            )


@dataclass
class RelevanceConfig:
    """Keyword lists used to decide which images are worth keeping."""

    image_keywords: Tuple[str, ...] = ("logo", "hero", "bbb", "google", "trust")
    alt_only_keywords: Tuple[str, ...] = ("badge",)


@dataclass
class CrawlConfig:
    """Tunables shared by both fetch strategies."""

    output_root: Path = Path(DEFAULT_OUTPUT_DIR)
    request_timeout: float = 30.0
    navigation_timeout: float = 30.0
    selector_timeout: float = 5.0
    content_selector: str = DEFAULT_CONTENT_SELECTOR
    queue_factor: int = 2
    relevance: RelevanceConfig = field(default_factory=RelevanceConfig)
