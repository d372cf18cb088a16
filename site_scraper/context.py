"""Mutable state owned by a single crawl job."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set

from .config import CrawlConfig, CrawlJob, InvalidJobError
from .models import CrawlResult, ImageRecord, PageRecord
from .utils import get_origin, resolve_path

logger = logging.getLogger("site_scraper")


@dataclass
class CrawlContext:
    """Frontier, visited set and accumulators for one strategy run.

    Each strategy invocation builds its own context so a Tier-2 run never
    sees anything a previous Tier-1 run discovered.
    """

    origin: str
    max_pages: int
    queue_limit: int
    frontier: Deque[str] = field(default_factory=lambda: deque(["/"]))
    visited: Set[str] = field(default_factory=set)
    pages: List[PageRecord] = field(default_factory=list)
    images: List[ImageRecord] = field(default_factory=list)
    service_areas: Set[str] = field(default_factory=set)

    @classmethod
    def for_job(cls, job: CrawlJob, config: CrawlConfig) -> "CrawlContext":
        origin = get_origin(job.source_url)
        if origin is None:
            raise InvalidJobError(f"Cannot determine origin of {job.source_url!r}")
        return cls(
            origin=origin,
            max_pages=job.max_pages,
            queue_limit=config.queue_factor * job.max_pages,
        )

    def has_budget(self) -> bool:
        return bool(self.frontier) and len(self.pages) < self.max_pages

    def next_path(self) -> Optional[str]:
        """Pop the next unvisited path and mark it visited."""
        while self.frontier:
            path = self.frontier.popleft()
            if path in self.visited:
                continue
            self.visited.add(path)
            return path
        return None

    def url_for(self, path: str) -> str:
        return resolve_path(self.origin, path)

    def enqueue(self, path: str) -> bool:
        """Offer a path to the frontier; returns False when it was not queued."""
        if path in self.visited:
            return False
        if len(self.frontier) >= self.queue_limit:
            logger.debug("Frontier full (%d); not queueing %s", self.queue_limit, path)
            return False
        self.frontier.append(path)
        return True

    def record(self, page: PageRecord) -> None:
        self.pages.append(page)

    def to_result(self) -> CrawlResult:
        unique: Dict[str, ImageRecord] = {}
        for image in self.images:
            unique.setdefault(image.url, image)
        return CrawlResult(
            pages=list(self.pages),
            images=list(unique.values()),
            service_areas=sorted(self.service_areas),
        )
