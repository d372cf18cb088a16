"""Stand-ins for requests sessions and the Playwright object graph."""

from __future__ import annotations

from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from requests.utils import get_encoding_from_headers

ORIGIN = "https://acme.example"

NAV_TIMEOUT = object()


def html_page(title: str = "", h1: str = "", h2s=(), links=(), extra: str = "") -> str:
    parts = ["<html><head>"]
    if title:
        parts.append(f"<title>{title}</title>")
    parts.append("</head><body>")
    if h1:
        parts.append(f"<h1>{h1}</h1>")
    for h2 in h2s:
        parts.append(f"<h2>{h2}</h2>")
    for href in links:
        parts.append(f'<a href="{href}">link</a>')
    parts.append(extra)
    parts.append("</body></html>")
    return "".join(parts)


class FakeResponse(requests.Response):
    """A real ``requests.Response`` built from a body and a Content-Type."""

    def __init__(
        self,
        body="",
        status_code: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        super().__init__()
        self._content = body.encode("utf-8") if isinstance(body, str) else body
        self.status_code = status_code
        self.headers["Content-Type"] = content_type
        self.encoding = get_encoding_from_headers(self.headers)


class FakeSession:
    """Serves canned responses keyed by absolute URL; unknown URLs are 404."""

    def __init__(self, pages: Dict[str, object]) -> None:
        self.pages = pages
        self.requested: List[str] = []
        self.headers: List[dict] = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.requested.append(url)
        self.headers.append(headers or {})
        entry = self.pages.get(url)
        if isinstance(entry, Exception):
            raise entry
        if entry is None:
            return FakeResponse("not found", 404)
        if isinstance(entry, FakeResponse):
            return entry
        return FakeResponse(entry)

    def close(self) -> None:
        self.closed = True


class FakeSite:
    """Rendered DOM per URL plus bookkeeping about the browser lifecycle."""

    def __init__(
        self,
        pages: Dict[str, object],
        injected_links: Optional[Dict[str, List[str]]] = None,
        statuses: Optional[Dict[str, int]] = None,
        fail_launch: bool = False,
        fail_context: bool = False,
        selector_timeout: bool = False,
    ) -> None:
        self.pages = pages
        self.injected_links = injected_links or {}
        self.statuses = statuses or {}
        self.fail_launch = fail_launch
        self.fail_context = fail_context
        self.selector_timeout = selector_timeout
        self.visited: List[str] = []
        self.opened_pages = 0
        self.closed_pages = 0
        self.contexts_closed = 0
        self.browser_closed = False
        self.launches = 0
        self.user_agent: Optional[str] = None


class FakePage:
    def __init__(self, site: FakeSite) -> None:
        self.site = site
        self.html = "<html><body></body></html>"
        self.url = ""

    async def goto(self, url, wait_until=None, timeout=None):
        self.url = url
        self.site.visited.append(url)
        entry = self.site.pages.get(url)
        if isinstance(entry, Exception):
            raise entry
        if entry is NAV_TIMEOUT:
            self.html = "<html><head><title>Partial</title></head><body></body></html>"
            raise PlaywrightTimeoutError("Timeout 30000ms exceeded")
        if entry is None:
            return SimpleNamespace(status=404)
        self.html = entry
        return SimpleNamespace(status=self.site.statuses.get(url, 200))

    async def wait_for_selector(self, selector, timeout=None):
        if self.site.selector_timeout:
            raise PlaywrightTimeoutError("Timeout 5000ms exceeded")

    async def content(self):
        return self.html

    async def eval_on_selector_all(self, selector, expression):
        soup = BeautifulSoup(self.html, "html.parser")
        hrefs = [a.get("href") for a in soup.find_all("a", href=True)]
        return hrefs + list(self.site.injected_links.get(self.url, []))

    async def close(self):
        self.site.closed_pages += 1


class FakeBrowserContext:
    def __init__(self, site: FakeSite) -> None:
        self.site = site

    async def new_page(self):
        self.site.opened_pages += 1
        return FakePage(self.site)

    async def close(self):
        self.site.contexts_closed += 1


class FakeBrowser:
    def __init__(self, site: FakeSite) -> None:
        self.site = site

    async def new_context(self, user_agent=None):
        if self.site.fail_context:
            raise RuntimeError("context creation failed")
        self.site.user_agent = user_agent
        return FakeBrowserContext(self.site)

    async def close(self):
        self.site.browser_closed = True


class FakeChromium:
    def __init__(self, site: FakeSite) -> None:
        self.site = site

    async def launch(self, headless=True):
        self.site.launches += 1
        if self.site.fail_launch:
            raise PlaywrightError("Executable doesn't exist")
        return FakeBrowser(self.site)


def playwright_factory(site: FakeSite):
    """Return a callable shaped like ``async_playwright``."""

    @asynccontextmanager
    async def factory():
        yield SimpleNamespace(chromium=FakeChromium(site))

    return factory
