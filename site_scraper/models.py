"""Data models used throughout the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

TIER_SIMPLE = "tier1-simple"
TIER_BROWSER = "tier2-playwright"


@dataclass(frozen=True)
class PageRecord:
    """Content extracted from one crawled page."""

    path: str
    title: str = ""
    meta_description: str = ""
    meta_robots: str = ""
    canonical: str = ""
    first_h1: str = ""
    h2s: List[str] = field(default_factory=list)
    structured_data: List[Any] = field(default_factory=list)
    internal_links: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.path,
            "title": self.title,
            "metaDescription": self.meta_description,
            "metaRobots": self.meta_robots,
            "canonical": self.canonical,
            "h1": self.first_h1,
            "h2s": list(self.h2s),
            "jsonLd": list(self.structured_data),
            "internalLinks": list(self.internal_links),
        }


@dataclass(frozen=True)
class ImageRecord:
    """Brand-relevant image discovered on a page."""

    url: str
    alt: str
    origin_path: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "alt": self.alt, "path": self.origin_path}


@dataclass
class CrawlResult:
    """Aggregated output of a single strategy run."""

    pages: List[PageRecord] = field(default_factory=list)
    images: List[ImageRecord] = field(default_factory=list)
    service_areas: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.pages)

    def site_map(self) -> List[Dict[str, str]]:
        return [{"url": page.path, "title": page.title} for page in self.pages]


@dataclass
class ScrapeOutcome:
    """Final result of a job along with the tier that produced it."""

    result: CrawlResult
    tier: str
    escalated: bool = False
    elapsed_seconds: float = 0.0
