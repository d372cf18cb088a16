"""Tier-1 strategy: plain HTTP fetches without script execution."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import requests

from .config import CrawlConfig, CrawlJob
from .content import extract_page
from .context import CrawlContext
from .models import CrawlResult

logger = logging.getLogger("site_scraper")


def _guess_encoding(response: requests.Response) -> str:
    """Pick a charset when the server sent none (requests assumes Latin-1)."""
    try:
        response.content.decode("utf-8")
    except UnicodeDecodeError:
        return response.encoding or response.apparent_encoding or "utf-8"
    return "utf-8"


def _fetch_html(
    session: requests.Session,
    url: str,
    user_agent: str,
    timeout: float,
) -> Optional[str]:
    """Return the body of a 2xx response, or ``None`` for any other status."""
    response = session.get(
        url,
        headers={"User-Agent": user_agent, "Accept": "text/html"},
        timeout=timeout,
    )
    if not 200 <= response.status_code < 300:
        logger.warning("[Tier 1] Failed to fetch %s: HTTP %s", url, response.status_code)
        return None
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = _guess_encoding(response)
    return response.text


async def scrape_simple(
    job: CrawlJob,
    config: CrawlConfig,
    session: Optional[requests.Session] = None,
) -> CrawlResult:
    """Crawl ``job.source_url`` breadth-first using raw HTML only."""
    context = CrawlContext.for_job(job, config)
    owns_session = session is None
    session = session or requests.Session()
    logger.info("[Tier 1] Starting simple HTML scraper for %s", context.origin)

    try:
        while context.has_budget():
            path = context.next_path()
            if path is None:
                break
            url = context.url_for(path)
            try:
                html = await asyncio.to_thread(
                    _fetch_html, session, url, job.user_agent, config.request_timeout
                )
                if html is None:
                    continue
                page = extract_page(
                    html, path, url, context, relevance=config.relevance
                )
            except requests.RequestException as exc:
                logger.warning("[Tier 1] Error scraping %s: %s", url, exc)
                continue
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("[Tier 1] Unexpected error scraping %s: %s", url, exc)
                continue
            context.record(page)
            logger.debug("[Tier 1] Recorded %s (%d/%d)", path, len(context.pages), job.max_pages)
    finally:
        if owns_session:
            session.close()

    result = context.to_result()
    logger.info(
        "[Tier 1] Finished: %d pages, %d images, %d service areas",
        len(result.pages),
        len(result.images),
        len(result.service_areas),
    )
    return result
