"""Bounded HTML fetcher.

A single GET under four bounds: wall-clock time, 2xx status, HTML content
type, and a byte ceiling on the body. Hitting the byte ceiling is not an
error; the prefix read so far is returned.
"""

import asyncio
import codecs
import logging
import socket
from collections.abc import AsyncIterator, Callable

import httpx

from social_preview.config import settings
from social_preview.services.errors import (
    ConnectionRefused,
    FetchTimeout,
    HostNotFound,
    NotHTML,
    PreviewError,
    Unclassified,
    UpstreamHTTPError,
)
from social_preview.services.url_validator import validate_url

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml")

_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


class BoundedReader:
    """Async iterator over byte chunks that stops at a byte ceiling.

    Chunks are passed through until the running total would exceed
    ``max_bytes``; the overflowing chunk is cut to fit and iteration ends.
    """

    def __init__(self, source: AsyncIterator[bytes], max_bytes: int):
        self.source = source
        self.max_bytes = max_bytes
        self.bytes_read = 0
        self.truncated = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self.source:
            remaining = self.max_bytes - self.bytes_read
            if len(chunk) > remaining:
                if remaining > 0:
                    self.bytes_read += remaining
                    yield chunk[:remaining]
                self.truncated = True
                return
            self.bytes_read += len(chunk)
            yield chunk


def _exception_chain(exc: BaseException):
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__ or exc.__context__


def _cause_kind(exc: BaseException) -> type[PreviewError] | None:
    """Failure kind found in the cause chain of ``exc``, if any.

    Hosts with several addresses fail with an exception group holding one
    error per attempt; the group takes a kind only when every attempt agrees.
    """
    for cause in _exception_chain(exc):
        if isinstance(cause, socket.gaierror):
            return HostNotFound
        if isinstance(cause, ConnectionRefusedError):
            return ConnectionRefused
        if isinstance(cause, BaseExceptionGroup):
            kinds = {_cause_kind(inner) for inner in cause.exceptions}
            if len(kinds) == 1 and None not in kinds:
                return kinds.pop()
    return None


def classify_connect_error(exc: httpx.ConnectError) -> PreviewError:
    """Map a connection failure to HostNotFound, ConnectionRefused or Unclassified."""
    kind = _cause_kind(exc)
    if kind is not None:
        return kind(str(exc))

    text = str(exc).lower()
    if any(marker in text for marker in _DNS_FAILURE_MARKERS):
        return HostNotFound(str(exc))
    if "connection refused" in text or "errno 111" in text:
        return ConnectionRefused(str(exc))
    return Unclassified(str(exc))


class BoundedFetcher:
    """Fetches HTML from a validated URL within time and size bounds."""

    def __init__(
        self,
        timeout: float | None = None,
        max_bytes: int | None = None,
        max_redirects: int | None = None,
        user_agent: str | None = None,
        validator: Callable[[str], str] = validate_url,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.max_bytes = max_bytes if max_bytes is not None else settings.fetch_max_bytes
        self.max_redirects = (
            max_redirects if max_redirects is not None else settings.fetch_max_redirects
        )
        self.user_agent = user_agent or settings.fetch_user_agent
        self.validator = validator
        self.transport = transport

    async def fetch(self, url: str) -> str:
        """
        Fetch the page at ``url`` and return it decoded as UTF-8.

        The deadline is anchored at the start of the call and covers
        connecting, redirects and reading the body.
        """
        logger.debug(f"Fetching {url}")
        try:
            return await asyncio.wait_for(self._fetch(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise FetchTimeout(f"Timed out after {self.timeout}s fetching {url}")

    async def _check_redirect_hop(self, request: httpx.Request) -> None:
        """Re-validate every outgoing request, including redirect targets."""
        target = str(request.url)
        try:
            self.validator(target)
        except PreviewError:
            logger.warning(f"Refusing redirect to {target}")
            raise
        logger.debug(f"Requesting {target}")

    async def _fetch(self, url: str) -> str:
        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml",
            },
            event_hooks={"request": [self._check_redirect_hop]},
        ) as client:
            try:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise UpstreamHTTPError(
                            response.status_code, response.reason_phrase
                        )

                    content_type = response.headers.get("content-type", "").lower()
                    if not any(ct in content_type for ct in HTML_CONTENT_TYPES):
                        raise NotHTML("URL does not return HTML")

                    return await self._read_body(response)

            except httpx.TimeoutException:
                raise FetchTimeout(f"Timed out fetching {url}")
            except httpx.ConnectError as e:
                raise classify_connect_error(e) from e
            except httpx.HTTPError as e:
                raise Unclassified(str(e)) from e

    async def _read_body(self, response: httpx.Response) -> str:
        reader = BoundedReader(response.aiter_bytes(), self.max_bytes)
        decoder = codecs.getincrementaldecoder("utf-8-sig")(errors="replace")

        parts = []
        async for chunk in reader:
            parts.append(decoder.decode(chunk))
        parts.append(decoder.decode(b"", final=True))

        if reader.truncated:
            logger.info(
                f"Response from {response.url} truncated at {reader.bytes_read} bytes"
            )
        return "".join(parts)
