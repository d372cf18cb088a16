"""Persist crawl results as JSON artifacts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .models import CrawlResult

logger = logging.getLogger("site_scraper")

SITE_MAP_FILE = "site-map.json"
PAGES_FILE = "pages.json"
IMAGES_FILE = "images.json"
SERVICE_AREAS_FILE = "service-areas.json"


class OutputWriteError(OSError):
    """Raised after writing when one or more artifacts could not be saved."""

    def __init__(self, failed: List[str]) -> None:
        super().__init__(f"Failed to write {', '.join(failed)}")
        self.failed = failed


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def build_artifacts(result: CrawlResult) -> Dict[str, Any]:
    return {
        SITE_MAP_FILE: result.site_map(),
        PAGES_FILE: [page.to_dict() for page in result.pages],
        IMAGES_FILE: [image.to_dict() for image in result.images],
        SERVICE_AREAS_FILE: list(result.service_areas),
    }


def write_outputs(result: CrawlResult, output_dir: Path) -> Dict[str, Path]:
    """Write the four JSON files; each is attempted even if another fails."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: Dict[str, Path] = {}
    failed: List[str] = []
    for filename, data in build_artifacts(result).items():
        destination = output_dir / filename
        try:
            write_json(destination, data)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write %s: %s", destination, exc)
            failed.append(filename)
            continue
        logger.info("Saved %s", destination)
        written[filename] = destination

    if failed:
        raise OutputWriteError(failed)
    return written
