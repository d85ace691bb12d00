"""
Core crawling logic and data structures.
"""
from __future__ import annotations

import logging
import sys
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set, Tuple
from urllib.parse import urldefrag, urljoin

import requests
from bs4 import BeautifulSoup, SoupStrainer

from sitemapper.urls import URLRecord, classify

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/111.0.0.0 Safari/537.36"
)

DEFAULT_TIMEOUT = 15.0

# Seeds on this subdomain are never crawled
BLOCKED_SUBDOMAIN = "languagecentre"

# Parse only <a> and <base> tags (faster link extraction)
LINK_STRAINER = SoupStrainer(["a", "base"])


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_fetched: int = 0
    pages_skipped: int = 0
    links_seen: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, status_code: Optional[int]) -> None:
        """Record an error by status code category."""
        if status_code is None:
            self.error_counts["connection_error"] += 1
        elif status_code >= 400:
            self.error_counts[str(status_code)] += 1

    @property
    def errors(self) -> int:
        """Total failed fetches across all categories."""
        return sum(self.error_counts.values())


class VisitedSet:
    """URLs already seen as links. Entries are never removed."""

    def __init__(self) -> None:
        self._urls: Set[str] = set()

    def observe(self, url: str) -> bool:
        """Record ``url``; True only the first time it is observed."""
        if url in self._urls:
            return False
        self._urls.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)


def build_session(user_agent: str = USER_AGENT) -> requests.Session:
    """Create an HTTP session that identifies itself with ``user_agent``."""
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


def is_blocked_seed(seed: URLRecord) -> bool:
    """Check whether the seed's subdomain is excluded from crawling."""
    return seed.subdomain.rstrip(".") == BLOCKED_SUBDOMAIN


def resolve_link(href: str, base: str) -> str:
    """
    Resolve ``href`` against ``base`` and drop any fragment.

    Returns "" for fragment-only links and hrefs that cannot be resolved.
    """
    href = href.strip()
    if href.startswith("#"):
        return ""
    try:
        absolute, _ = urldefrag(urljoin(base, href))
    except ValueError:
        return ""
    return absolute


def extract_links(html: str, page_url: str) -> List[str]:
    """Extract absolute link targets from <a href> tags, in document order."""
    soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)

    base = page_url
    base_tag = soup.find("base", href=True)
    if base_tag is not None:
        base = resolve_link(base_tag["href"], page_url) or page_url

    return [resolve_link(a["href"], base) for a in soup.find_all("a", href=True)]


def is_admissible(record: URLRecord, seed: URLRecord) -> bool:
    """Check that a discovered URL belongs to the seed's site."""
    return (
        record.domain != ""
        and record.tld != ""
        and record.domain == seed.domain
        and not is_blocked_seed(seed)
    )


def sort_records(records: List[URLRecord]) -> None:
    """Sort records in place by URL."""
    records.sort(key=lambda record: record.url)


def print_scan_line(url: str, status: Optional[int], new_links: int) -> None:
    """Print single scan result line."""
    status_str = str(status) if status else "ERR"
    sys.stderr.write(f"  -> {status_str} {url} (+{new_links} links)\n")
    sys.stderr.flush()


def _fetch(session: requests.Session, url: str, timeout_s: float, stats: CrawlStats) -> Optional[requests.Response]:
    """GET ``url``; failures are logged and counted, never raised."""
    try:
        resp = session.get(url, timeout=timeout_s, allow_redirects=True)
        resp.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.warning("Request to %s failed: %s", url, e)
        stats.record_error(status)
        return None
    except requests.RequestException as e:
        logger.warning("Request to %s failed: %s", url, e)
        stats.record_error(None)
        return None

    stats.pages_fetched += 1
    return resp


def crawl(
    seed: URLRecord,
    session: Optional[requests.Session] = None,
    timeout_s: float = DEFAULT_TIMEOUT,
    verbose: bool = False,
) -> Tuple[List[URLRecord], CrawlStats]:
    """
    Crawl every same-domain page reachable from the seed using BFS traversal.

    Args:
        seed: The classified start URL.
        session: HTTP session to fetch with. One carrying the default
                 User-Agent is created (and closed) when omitted.
        timeout_s: HTTP request timeout in seconds.
        verbose: Whether to print a result line per fetched page.

    Returns:
        Tuple of (accepted records in discovery order, crawl statistics).
    """
    stats = CrawlStats()
    accepted: List[URLRecord] = []

    if is_blocked_seed(seed):
        logger.info("Seed subdomain %r is blocked, not crawling", seed.subdomain)
        return accepted, stats

    owns_session = session is None
    if session is None:
        session = build_session()

    # The seed is fetched but never entered into visited
    visited = VisitedSet()
    fetched: Set[str] = set()
    queue: Deque[str] = deque([seed.url])

    try:
        while queue:
            url = queue.popleft()

            if url in fetched:
                continue
            fetched.add(url)

            sys.stderr.write(f"Visiting {url}\n")
            sys.stderr.flush()

            resp = _fetch(session, url, timeout_s, stats)
            if resp is None:
                if verbose:
                    print_scan_line(url, None, 0)
                continue

            # Only parse HTML content
            content_type = (resp.headers.get("content-type") or "").lower()
            if "html" not in content_type:
                stats.pages_skipped += 1
                if verbose:
                    print_scan_line(url, resp.status_code, 0)
                continue

            new_links_count = 0
            for link in extract_links(resp.text, resp.url or url):
                if not link:
                    continue
                stats.links_seen += 1
                if not visited.observe(link):
                    continue

                record = classify(link, strict=False, suffix=seed.tld)
                if not is_admissible(record, seed):
                    continue

                accepted.append(record)
                queue.append(link)
                new_links_count += 1

            if verbose:
                print_scan_line(url, resp.status_code, new_links_count)
    finally:
        if owns_session:
            session.close()

    return accepted, stats
