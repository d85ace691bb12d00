"""Shared fixtures: an in-memory stand-in for requests.Session."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

import pytest
import requests

Page = Union[str, int, Exception, "FakeResponse"]


class FakeResponse:
    """Just enough of requests.Response for the crawler."""

    def __init__(self, url: str, text: str = "", status_code: int = 200,
                 content_type: str = "text/html; charset=utf-8") -> None:
        self.url = url
        self.text = text
        self.status_code = status_code
        self.headers = {"content-type": content_type}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)


class FakeSession:
    """
    Serves pages from a dict keyed by URL.

    Values may be HTML text, a status code, an exception to raise, or a
    ready-made FakeResponse. Unknown URLs answer 404.
    """

    def __init__(self, pages: Dict[str, Page]) -> None:
        self.pages = pages
        self.requested: List[str] = []
        self.headers: Dict[str, str] = {}
        self.closed = False

    def get(self, url: str, timeout: Optional[float] = None, allow_redirects: bool = True) -> FakeResponse:
        self.requested.append(url)
        page = self.pages.get(url, 404)
        if isinstance(page, Exception):
            raise page
        if isinstance(page, FakeResponse):
            return page
        if isinstance(page, int):
            return FakeResponse(url, status_code=page)
        return FakeResponse(url, text=page)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session():
    """Factory fixture: fake_session({url: page, ...})."""
    return FakeSession
