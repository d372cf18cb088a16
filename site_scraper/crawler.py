"""High-level orchestration: choose a strategy and escalate when needed."""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Sequence

from .config import MODE_BROWSER, MODE_SIMPLE, CrawlConfig, CrawlJob
from .fetch import scrape_simple
from .models import TIER_BROWSER, TIER_SIMPLE, CrawlResult, PageRecord, ScrapeOutcome
from .render import scrape_browser

logger = logging.getLogger("site_scraper")

Strategy = Callable[[CrawlJob, CrawlConfig], Awaitable[CrawlResult]]
SufficiencyClause = Callable[[PageRecord], bool]

DEFAULT_SUFFICIENCY_CLAUSES: Sequence[SufficiencyClause] = (
    lambda page: bool(page.first_h1),
    lambda page: bool(page.title),
    lambda page: bool(page.h2s),
)


def has_sufficient_content(
    result: CrawlResult,
    clauses: Sequence[SufficiencyClause] = DEFAULT_SUFFICIENCY_CLAUSES,
) -> bool:
    """Cheap check for "real page" versus "empty client-rendered shell"."""
    if not result.pages:
        return False
    return any(clause(page) for page in result.pages for clause in clauses)


async def run_scrape(
    job: CrawlJob,
    config: CrawlConfig,
    *,
    simple_strategy: Strategy = scrape_simple,
    browser_strategy: Strategy = scrape_browser,
    clauses: Sequence[SufficiencyClause] = DEFAULT_SUFFICIENCY_CLAUSES,
) -> ScrapeOutcome:
    """Run ``job`` in its requested mode and return the final result.

    Each state change is logged as ``[State] <name>``, walking NotStarted,
    Tier1Running, Tier1Accepted or EscalatingToTier2, Tier2Running and Done.
    """
    start = time.perf_counter()
    logger.info(
        "[State] NotStarted: %s (mode=%s, max_pages=%d)",
        job.source_url,
        job.mode,
        job.max_pages,
    )

    if job.mode == MODE_BROWSER:
        logger.info("[State] Tier2Running (browser mode forced)")
        result = await browser_strategy(job, config)
        return _done(ScrapeOutcome(result, TIER_BROWSER, elapsed_seconds=_since(start)))

    if job.mode == MODE_SIMPLE:
        logger.info("[State] Tier1Running (simple mode forced)")
        result = await simple_strategy(job, config)
        return _done(ScrapeOutcome(result, TIER_SIMPLE, elapsed_seconds=_since(start)))

    logger.info("[State] Tier1Running (auto)")
    result = await simple_strategy(job, config)
    if has_sufficient_content(result, clauses):
        logger.info("[State] Tier1Accepted (%d pages)", len(result.pages))
        return _done(ScrapeOutcome(result, TIER_SIMPLE, elapsed_seconds=_since(start)))

    logger.info(
        "[State] EscalatingToTier2: no usable content in %d Tier 1 pages",
        len(result.pages),
    )
    logger.info("[State] Tier2Running")
    result = await browser_strategy(job, config)
    return _done(
        ScrapeOutcome(
            result,
            TIER_BROWSER,
            escalated=True,
            elapsed_seconds=_since(start),
        )
    )


def _since(start: float) -> float:
    return time.perf_counter() - start


def _done(outcome: ScrapeOutcome) -> ScrapeOutcome:
    logger.info(
        "[State] Done: %s, %d pages in %.2fs",
        outcome.tier,
        len(outcome.result.pages),
        outcome.elapsed_seconds,
    )
    return outcome
