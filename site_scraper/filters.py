"""Heuristic filters for images and structured data."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional, Set

from .config import RelevanceConfig

LOCAL_BUSINESS_TYPE = "LocalBusiness"

_DEFAULT_RELEVANCE = RelevanceConfig()


def is_relevant_image(
    src: str,
    alt: str,
    config: Optional[RelevanceConfig] = None,
) -> bool:
    """Return True for logos, hero shots and trust badges."""
    config = config or _DEFAULT_RELEVANCE
    lower_src = (src or "").lower()
    lower_alt = (alt or "").lower()
    if any(k in lower_src or k in lower_alt for k in config.image_keywords):
        return True
    return any(k in lower_alt for k in config.alt_only_keywords)


def _iter_blocks(structured_data: Iterable[Any]) -> Iterator[Mapping[str, Any]]:
    pending = list(structured_data)[::-1]
    while pending:
        block = pending.pop()
        if isinstance(block, list):
            pending.extend(reversed(block))
        elif isinstance(block, Mapping):
            yield block
            graph = block.get("@graph")
            if isinstance(graph, list):
                pending.extend(reversed(graph))


def _is_local_business(block: Mapping[str, Any]) -> bool:
    block_type = block.get("@type")
    if isinstance(block_type, list):
        return LOCAL_BUSINESS_TYPE in block_type
    return block_type == LOCAL_BUSINESS_TYPE


def _area_name(area: Any) -> Optional[str]:
    if isinstance(area, str):
        return area
    if isinstance(area, Mapping) and isinstance(area.get("name"), str):
        return area["name"]
    return None


def extract_service_areas(structured_data: Iterable[Any], target: Set[str]) -> None:
    """Union service areas and address localities into ``target``."""
    for block in _iter_blocks(structured_data):
        if _is_local_business(block) and block.get("serviceArea"):
            areas = block["serviceArea"]
            if not isinstance(areas, list):
                areas = [areas]
            for area in areas:
                name = _area_name(area)
                if name:
                    target.add(name)

        address = block.get("address")
        if isinstance(address, Mapping):
            locality = address.get("addressLocality")
            if isinstance(locality, str) and locality:
                target.add(locality)
