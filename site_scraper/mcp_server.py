"""MCP server exposing the site scraper as a tool."""

from __future__ import annotations

import json
import logging

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_MAX_PAGES, MODE_AUTO, CrawlConfig, CrawlJob
from .crawler import run_scrape
from .models import ScrapeOutcome

logger = logging.getLogger("site_scraper.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="site-scraper")


def outcome_to_payload(outcome: ScrapeOutcome) -> dict:
    result = outcome.result
    return {
        "tier": outcome.tier,
        "success": result.success,
        "siteMap": result.site_map(),
        "pages": [page.to_dict() for page in result.pages],
        "images": [image.to_dict() for image in result.images],
        "serviceAreas": list(result.service_areas),
    }


@mcp.tool()
async def scrape(
    url: str,
    mode: str = MODE_AUTO,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> str:
    """Crawl a website and return its pages, images and service areas as JSON."""

    job = CrawlJob(source_url=url, mode=mode, max_pages=max_pages)
    outcome = await run_scrape(job, CrawlConfig())
    if not outcome.result.success:
        logger.error("No pages recorded for %s", url)
    return json.dumps(outcome_to_payload(outcome), ensure_ascii=False)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
