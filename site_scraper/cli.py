"""Command-line entry point for the site scraper."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .config import (
    DEFAULT_MAX_PAGES,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_USER_AGENT,
    MODE_AUTO,
    MODES,
    CrawlConfig,
    CrawlJob,
)
from .crawler import run_scrape
from .models import ScrapeOutcome
from .output import write_outputs

logger = logging.getLogger("site_scraper.cli")

SITE_OUTPUT_SUBDIR = Path("data") / "scraped"


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first in ("-h", "--help"):
        return argv
    return ("scrape", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--url", required=True, help="Root URL of the site to crawl")
    parser.add_argument(
        "--mode",
        choices=MODES,
        default=MODE_AUTO,
        help="simple: static HTML only; browser: headless Chromium only; "
        "auto: static HTML first, Chromium if no content was found",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=DEFAULT_MAX_PAGES,
        help="Maximum number of pages to record",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with every request",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Per-page request and navigation timeout in seconds",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Crawl a website and extract titles, headings, structured data, "
            "brand images and service areas to JSON."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape_parser = subparsers.add_parser(
        "scrape", help="Crawl a site and write JSON output to a directory"
    )
    _add_common_arguments(scrape_parser)
    scrape_parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_DIR,
        type=Path,
        help="Directory where the JSON files should be written",
    )

    site_parser = subparsers.add_parser(
        "site", help="Crawl a site into <sites-root>/<site>/data/scraped"
    )
    _add_common_arguments(site_parser)
    site_parser.add_argument("--site", required=True, help="Name of the site folder")
    site_parser.add_argument(
        "--sites-root",
        default="sites",
        type=Path,
        help="Directory containing the site folders",
    )

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _resolve_output_dir(args: argparse.Namespace) -> Path:
    if args.command == "site":
        site_dir = Path(args.sites_root) / args.site
        if not site_dir.is_dir():
            raise FileNotFoundError(f"Site folder not found: {site_dir.resolve()}")
        return (site_dir / SITE_OUTPUT_SUBDIR).resolve()
    return Path(args.output).resolve()


def _log_summary(outcome: ScrapeOutcome, written: dict) -> None:
    result = outcome.result
    logger.info(
        "Scraping complete (%s%s) in %.2fs",
        outcome.tier,
        ", escalated from tier1-simple" if outcome.escalated else "",
        outcome.elapsed_seconds,
    )
    logger.info("  Pages: %d", len(result.pages))
    logger.info("  Images: %d", len(result.images))
    logger.info("  Service Areas: %d", len(result.service_areas))
    for path in written.values():
        logger.info("  Wrote %s", path)
    if not result.success:
        logger.warning("No pages were recorded for this site")


def _run_scrape(args: argparse.Namespace) -> None:
    job = CrawlJob(
        source_url=args.url,
        mode=args.mode,
        max_pages=args.max_pages,
        user_agent=args.user_agent,
    )
    output_dir = _resolve_output_dir(args)
    config = CrawlConfig(
        output_root=output_dir,
        request_timeout=args.timeout,
        navigation_timeout=args.timeout,
    )
    logger.info("Source URL: %s", job.source_url)
    logger.info("Mode: %s", job.mode)
    logger.info("Output: %s", output_dir)

    outcome = asyncio.run(run_scrape(job, config))
    written = write_outputs(outcome.result, config.output_root)
    _log_summary(outcome, written)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    try:
        _run_scrape(args)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Scraping failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
