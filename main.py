from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from listing_scraper.config import (
    DEFAULT_IDENTITY_FIELD,
    DEFAULT_MAX_RECORDS,
    DEFAULT_PAGINATION_SELECTOR,
    DEFAULT_TIMEOUT_SECS,
    DEFAULT_WAIT_SECS,
    RENDERERS,
    build_job_config,
    load_field_mapping,
)
from listing_scraper.errors import ConfigError
from listing_scraper.models import JobConfig
from listing_scraper.quality import QualityReporter, format_summary
from listing_scraper.resilience import run_job
from listing_scraper.storage import create_storage

logger = logging.getLogger("listing_scraper")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape paginated listing pages into JSON or CSV")

    parser.add_argument("--url", required=True, help="URL of the first listing page")
    parser.add_argument("--mapping", required=True, help="Path to the JSON field mapping (name -> selector[@attr:name])")
    parser.add_argument("--record", required=True, help="CSS selector for one listing item")
    parser.add_argument("--pagination", default=DEFAULT_PAGINATION_SELECTOR, help="CSS selector for the next-page control")
    parser.add_argument("--identity-field", default=DEFAULT_IDENTITY_FIELD, help="Field that must be non-empty for a record to count")

    parser.add_argument("--max", type=int, default=DEFAULT_MAX_RECORDS, help="Maximum number of records to scrape")
    parser.add_argument("--wait", type=float, default=DEFAULT_WAIT_SECS, help="Seconds to wait between page fetches")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_SECS, help="Seconds allowed to render one page")

    parser.add_argument("--format", default="json", choices=("json", "csv"), help="Output format")
    parser.add_argument("--output", default="output", help="Output file name (without extension)")

    parser.add_argument("--renderer", default="browser", choices=RENDERERS, help="Rendering backend")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def config_from_args(args: argparse.Namespace) -> JobConfig:
    fields = load_field_mapping(args.mapping)
    return build_job_config(
        url=args.url,
        record_selector=args.record,
        fields=fields,
        pagination_selector=args.pagination,
        identity_field=args.identity_field,
        max_records=args.max,
        wait_time=args.wait,
        timeout=args.timeout,
        renderer=args.renderer,
        headless=not args.headed,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        storage = create_storage(args.format, args.output, url_fields=config.url_fields)
    except ConfigError as exc:
        logger.error("configuration error: %s", exc)
        return 2

    result = run_job(config)
    storage.write(result.records)

    report = QualityReporter().report(result.records)
    print(format_summary(report))
    print(f"\nDONE: records={len(result.records)} attempts={result.attempts} output={storage.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
