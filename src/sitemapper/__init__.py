"""
Web crawler that maps every same-domain page reachable from a seed URL.
Writes the discovered URLs as a site map in CSV, JSON and/or TXT form.
"""
from sitemapper.core import crawl, CrawlStats, VisitedSet
from sitemapper.urls import classify, URLParseError, URLRecord

__version__ = "1.0.0"
__all__ = ["crawl", "classify", "CrawlStats", "URLParseError", "URLRecord", "VisitedSet"]
