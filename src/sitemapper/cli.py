"""
Command-line interface for the site mapper.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from sitemapper.core import DEFAULT_TIMEOUT, CrawlStats, build_session, crawl, sort_records
from sitemapper.urls import URLParseError, classify
from sitemapper.writers import FORMATS

DEFAULT_SEED = "https://brightdata.com"
DEFAULT_FORMAT = "a"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    # Set third-party library log levels
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_summary(stats: CrawlStats, accepted: int) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages fetched:          {stats.pages_fetched}\n")
    sys.stderr.write(f"Non-HTML pages:         {stats.pages_skipped}\n")
    sys.stderr.write(f"Links seen:             {stats.links_seen}\n")
    sys.stderr.write(f"URLs in site map:       {accepted}\n")
    sys.stderr.write(f"Failed fetches:         {stats.errors}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            label = "Connection errors" if error_type == "connection_error" else f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def writing_message(labels: List[str]) -> str:
    """Progress message naming the files about to be written."""
    if len(labels) == 1:
        return f"Writing {labels[0]} file..."
    return f"Writing {', '.join(labels[:-1])} and {labels[-1]} files..."


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI flags."""
    parser = argparse.ArgumentParser(
        prog="site-mapper",
        description="Crawl every same-domain page reachable from a URL and write a site map.",
    )
    parser.add_argument("-u", "--url", default=DEFAULT_SEED, help=f"URL to scrape (default: {DEFAULT_SEED})")
    parser.add_argument(
        "-f", "--format",
        default=DEFAULT_FORMAT,
        help="Output format: a = CSV, JSON and TXT, c = CSV, j = JSON, t = TXT (default: a)",
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("-o", "--out-dir", default=".", help="Directory for output files (default: current directory)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show per-page results and summary")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the site mapper CLI."""
    sys.stderr.write("CRALWER...\n")
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        seed = classify(args.url, strict=True)
    except URLParseError as e:
        sys.stderr.write(f"{e}\n")
        return 1
    sys.stderr.write(seed.describe() + "\n")

    writers = FORMATS.get(args.format)
    if writers is None:
        sys.stderr.write("Not a valid file type. Not writing....\n")
        return 0

    session = build_session()
    try:
        accepted, stats = crawl(seed, session=session, timeout_s=args.timeout, verbose=args.verbose)
    finally:
        session.close()

    sort_records(accepted)

    sys.stderr.write(writing_message([label for label, _ in writers]) + "\n")
    for label, write in writers:
        try:
            path = write(accepted, seed, args.out_dir)
        except OSError as e:
            sys.stderr.write(f"Failed to write {label} file: {e}\n")
            return 1
        if args.verbose:
            sys.stderr.write(f"Results written to: {path}\n")

    if args.verbose:
        print_summary(stats, len(accepted))

    sys.stderr.write("Scraping completed\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
