"""Tier-2 strategy: render pages in headless Chromium before extraction."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import CrawlConfig, CrawlJob
from .content import extract_page
from .context import CrawlContext
from .models import CrawlResult

logger = logging.getLogger("site_scraper")

_ANCHOR_HREFS_JS = "anchors => anchors.map(a => a.getAttribute('href'))"


class BrowserLaunchError(RuntimeError):
    """Raised when the headless browser cannot be started."""


async def _launch_browser(playwright: Playwright) -> Browser:
    try:
        return await playwright.chromium.launch(headless=True)
    except PlaywrightError as exc:
        raise BrowserLaunchError(f"Failed to launch Chromium: {exc}") from exc


async def render_page(
    browser_context: BrowserContext,
    url: str,
    config: CrawlConfig,
) -> Optional[Tuple[str, List[Optional[str]]]]:
    """Load ``url`` in a fresh tab and return its HTML and live anchor hrefs.

    Returns ``None`` when the server answers with an error status. The tab is
    always closed before returning.
    """
    page = await browser_context.new_page()
    try:
        try:
            response = await page.goto(
                url,
                wait_until="networkidle",
                timeout=config.navigation_timeout * 1000,
            )
        except PlaywrightTimeoutError:
            logger.warning("[Tier 2] Navigation timeout for %s; using partial DOM", url)
            response = None
        if response is not None and response.status >= 400:
            logger.warning("[Tier 2] Failed to load %s: HTTP %s", url, response.status)
            return None

        try:
            await page.wait_for_selector(
                config.content_selector,
                timeout=config.selector_timeout * 1000,
            )
        except PlaywrightTimeoutError:
            logger.debug("[Tier 2] Content selector not found on %s", url)

        html = await page.content()
        hrefs = await page.eval_on_selector_all("a[href]", _ANCHOR_HREFS_JS)
        return html, hrefs
    finally:
        await page.close()


async def scrape_browser(
    job: CrawlJob,
    config: CrawlConfig,
    playwright_factory: Callable = async_playwright,
) -> CrawlResult:
    """Crawl ``job.source_url`` breadth-first with one shared headless browser."""
    context = CrawlContext.for_job(job, config)
    logger.info("[Tier 2] Starting Playwright scraper for %s", context.origin)

    async with playwright_factory() as playwright:
        browser = await _launch_browser(playwright)
        try:
            browser_context = await browser.new_context(user_agent=job.user_agent)
            try:
                while context.has_budget():
                    path = context.next_path()
                    if path is None:
                        break
                    url = context.url_for(path)
                    try:
                        rendered = await render_page(browser_context, url, config)
                        if rendered is None:
                            continue
                        html, hrefs = rendered
                        page = extract_page(
                            html,
                            path,
                            url,
                            context,
                            links=hrefs,
                            relevance=config.relevance,
                        )
                    except Exception as exc:  # pylint: disable=broad-except
                        logger.warning("[Tier 2] Error scraping %s: %s", url, exc)
                        continue
                    context.record(page)
                    logger.debug(
                        "[Tier 2] Recorded %s (%d/%d)", path, len(context.pages), job.max_pages
                    )
            finally:
                await browser_context.close()
        finally:
            await browser.close()

    result = context.to_result()
    logger.info(
        "[Tier 2] Finished: %d pages, %d images, %d service areas",
        len(result.pages),
        len(result.images),
        len(result.service_areas),
    )
    return result
