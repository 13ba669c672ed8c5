"""Shared fixtures. Nothing here touches the network."""

import httpx
import pytest
from fastapi.testclient import TestClient

from social_preview.api.deps import get_extraction_service, get_rate_limiter
from social_preview.main import app
from social_preview.services.bounded_fetcher import BoundedFetcher
from social_preview.services.extraction_service import ExtractionService
from social_preview.services.rate_limiter import SlidingWindowRateLimiter

HTML_HEADERS = {"content-type": "text/html; charset=utf-8"}


def html_page(head: str = "", body: str = "") -> str:
    return f"<!doctype html><html><head>{head}</head><body>{body}</body></html>"


class FakeFetcher:
    """Stands in for BoundedFetcher; returns canned HTML or raises."""

    def __init__(self, html: str = "", error: Exception | None = None):
        self.html = html
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.html


def mock_fetcher(handler, **kwargs) -> BoundedFetcher:
    """BoundedFetcher whose requests are answered by ``handler``."""
    return BoundedFetcher(transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher(
        html=html_page(
            '<title>Example Domain</title>'
            '<meta property="og:image" content="/img/cover.png">'
            '<link rel="icon" href="/favicon.ico">'
        )
    )


@pytest.fixture()
def rate_limiter() -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(max_requests=30, window_seconds=60)


@pytest.fixture()
def client(fake_fetcher, rate_limiter):
    """TestClient wired to a fake fetcher and a fresh rate limiter."""
    service = ExtractionService(fetcher=fake_fetcher)
    app.dependency_overrides[get_extraction_service] = lambda: service
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
