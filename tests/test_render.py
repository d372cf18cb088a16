import asyncio

import pytest

from fakes import NAV_TIMEOUT, ORIGIN, FakeSite, html_page, playwright_factory
from site_scraper.config import CrawlConfig, CrawlJob
from site_scraper.render import BrowserLaunchError, scrape_browser


def _run(site, max_pages=5, user_agent="TestBot/1.0"):
    job = CrawlJob(ORIGIN, mode="browser", max_pages=max_pages, user_agent=user_agent)
    return asyncio.run(
        scrape_browser(job, CrawlConfig(), playwright_factory=playwright_factory(site))
    )


def test_renders_pages_breadth_first_with_one_browser():
    site = FakeSite(
        {
            ORIGIN + "/": html_page(title="Home", h1="Welcome", links=["/a", "/b"]),
            ORIGIN + "/a": html_page(title="A", links=["/c"]),
            ORIGIN + "/b": html_page(title="B"),
            ORIGIN + "/c": html_page(title="C"),
        }
    )
    result = _run(site, user_agent="AcmeBot/2.0")

    assert [page.path for page in result.pages] == ["/", "/a", "/b", "/c"]
    assert site.launches == 1
    assert site.user_agent == "AcmeBot/2.0"
    assert site.browser_closed
    assert site.contexts_closed == 1


def test_follows_links_injected_by_client_side_routing():
    site = FakeSite(
        {
            ORIGIN + "/": html_page(title="App"),
            ORIGIN + "/pricing": html_page(title="Pricing"),
        },
        injected_links={ORIGIN + "/": ["pricing", "https://external.example/pricing"]},
    )
    result = _run(site)

    assert [page.path for page in result.pages] == ["/", "/pricing"]
    assert result.pages[0].internal_links == ["/pricing"]


def test_every_tab_is_closed_even_on_errors():
    site = FakeSite(
        {
            ORIGIN + "/": html_page(title="Home", links=["/boom", "/missing", "/ok"]),
            ORIGIN + "/boom": RuntimeError("renderer crashed"),
            ORIGIN + "/ok": html_page(title="OK"),
        }
    )
    result = _run(site)

    assert [page.path for page in result.pages] == ["/", "/ok"]
    assert site.opened_pages == 4
    assert site.closed_pages == 4
    assert site.browser_closed


def test_navigation_timeout_keeps_partial_dom():
    site = FakeSite({ORIGIN + "/": NAV_TIMEOUT})
    result = _run(site)

    assert [page.title for page in result.pages] == ["Partial"]


def test_selector_timeout_is_not_fatal():
    site = FakeSite({ORIGIN + "/": html_page(title="Home")}, selector_timeout=True)
    result = _run(site)

    assert [page.title for page in result.pages] == ["Home"]


def test_error_status_pages_are_skipped():
    site = FakeSite(
        {
            ORIGIN + "/": html_page(title="Home", links=["/private"]),
            ORIGIN + "/private": html_page(title="Forbidden"),
        },
        statuses={ORIGIN + "/private": 403},
    )
    result = _run(site)

    assert [page.path for page in result.pages] == ["/"]


def test_page_cap_is_respected():
    links = [f"/p{i}" for i in range(10)]
    pages = {ORIGIN + "/": html_page(title="Home", links=links)}
    pages.update({ORIGIN + link: html_page(title=link) for link in links})
    site = FakeSite(pages)
    result = _run(site, max_pages=2)

    assert len(result.pages) == 2
    assert len(site.visited) == 2


def test_launch_failure_is_fatal():
    site = FakeSite({ORIGIN + "/": html_page(title="Home")}, fail_launch=True)

    with pytest.raises(BrowserLaunchError):
        _run(site)
    assert site.opened_pages == 0


def test_browser_is_closed_when_the_run_fails():
    site = FakeSite({ORIGIN + "/": html_page(title="Home")}, fail_context=True)

    with pytest.raises(RuntimeError, match="context creation failed"):
        _run(site)
    assert site.browser_closed
