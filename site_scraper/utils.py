"""URL helpers for turning discovered links into path keys."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlparse, urlsplit

from requests.utils import requote_uri

DEFAULT_PORTS = {"http": 80, "https": 443}


def get_origin(url: str) -> Optional[str]:
    """Return ``scheme://host[:port]`` for an absolute URL, or ``None``."""
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.hostname:
        return None
    scheme = parsed.scheme.lower()
    origin = f"{scheme}://{parsed.hostname.lower()}"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        origin = f"{origin}:{port}"
    return origin


def normalize_link(href: str, origin_base: str) -> Optional[str]:
    """Canonicalize ``href`` into a same-origin path key.

    Returns ``None`` for malformed or cross-origin links. Query strings and
    fragments are dropped, so ``/a?page=2`` and ``/a`` share one key. The path
    is percent-encoded, so ``/about us`` and ``/about%20us`` share one key too.
    """
    if not href:
        return None
    try:
        resolved = urljoin(origin_base, href.strip())
    except ValueError:
        return None
    base_origin = get_origin(origin_base)
    if base_origin is None or get_origin(resolved) != base_origin:
        return None
    return requote_uri(urlsplit(resolved).path).rstrip("/") or "/"


def resolve_path(origin: str, path: str) -> str:
    """Build the absolute URL for a path key on ``origin``."""
    return origin.rstrip("/") + path
