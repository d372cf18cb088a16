"""HTML extraction and metadata parsing utilities."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .config import RelevanceConfig
from .context import CrawlContext
from .filters import extract_service_areas, is_relevant_image
from .models import ImageRecord, PageRecord
from .utils import normalize_link

logger = logging.getLogger("site_scraper")


def _text(tag) -> str:
    return tag.get_text().strip() if tag else ""


def _attr(soup: BeautifulSoup, name: str, attrs: dict, key: str) -> str:
    tag = soup.find(name, attrs=attrs)
    if tag and tag.get(key):
        value = tag[key]
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip()
    return ""


def _parse_structured_data(soup: BeautifulSoup, page_url: str) -> List[Any]:
    """Parse each JSON-LD script on its own so one bad block costs only itself."""
    blocks: List[Any] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string if script.string is not None else script.get_text()
        try:
            blocks.append(json.loads(raw))
        except (ValueError, RecursionError) as exc:
            logger.warning("Skipping malformed JSON-LD block on %s: %s", page_url, exc)
    return blocks


def _anchor_hrefs(soup: BeautifulSoup, origin: str) -> Iterable[str]:
    """Root-relative or same-origin absolute anchors from static markup."""
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href.startswith("/") or href.startswith(origin):
            yield href


def _collect_links(
    hrefs: Iterable[Optional[str]],
    context: CrawlContext,
) -> List[str]:
    links: List[str] = []
    for href in hrefs:
        if not href:
            continue
        normalized = normalize_link(href, context.origin)
        if normalized and normalized not in context.visited:
            links.append(normalized)
            context.enqueue(normalized)
    return links


def _collect_images(
    soup: BeautifulSoup,
    path: str,
    page_url: str,
    context: CrawlContext,
    relevance: Optional[RelevanceConfig],
) -> None:
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        alt = img.get("alt", "") or ""
        if not is_relevant_image(src, alt, relevance):
            continue
        try:
            absolute_url = urljoin(page_url, src.strip())
        except ValueError:
            logger.debug("Unresolvable image src %r on %s", src, page_url)
            continue
        context.images.append(ImageRecord(url=absolute_url, alt=alt, origin_path=path))


def extract_page(
    html: str,
    path: str,
    page_url: str,
    context: CrawlContext,
    links: Optional[Iterable[Optional[str]]] = None,
    relevance: Optional[RelevanceConfig] = None,
) -> PageRecord:
    """Build a page record from loaded HTML.

    Discovered internal links are offered to the context's frontier, relevant
    images are appended to its image list and service areas are merged into
    its service-area set. ``links`` overrides anchor discovery with hrefs
    read from a live DOM.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    structured_data = _parse_structured_data(soup, page_url)
    hrefs = links if links is not None else _anchor_hrefs(soup, context.origin)
    internal_links = _collect_links(hrefs, context)
    _collect_images(soup, path, page_url, context, relevance)
    extract_service_areas(structured_data, context.service_areas)

    return PageRecord(
        path=path,
        title=_text(soup.find("title")),
        meta_description=_attr(soup, "meta", {"name": "description"}, "content"),
        meta_robots=_attr(soup, "meta", {"name": "robots"}, "content"),
        canonical=_attr(soup, "link", {"rel": "canonical"}, "href"),
        first_h1=_text(soup.find("h1")),
        h2s=[tag.get_text().strip() for tag in soup.find_all("h2")],
        structured_data=structured_data,
        internal_links=internal_links,
    )
