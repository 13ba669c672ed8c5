#!/usr/bin/env python3
"""Fetch a URL and print its social-preview metadata as JSON.

Runs the extraction pipeline directly, without the HTTP server or the
rate limiter.

Usage (from the repository root):
    python tools/preview_url.py https://example.com
    python tools/preview_url.py https://example.com --platform discord
    python tools/preview_url.py https://example.com --timeout 5
"""

import argparse
import asyncio
import json
import sys

from social_preview.services.bounded_fetcher import BoundedFetcher
from social_preview.services.errors import PreviewError
from social_preview.services.extraction_service import ExtractionService
from social_preview.services.preview_renderer import PLATFORMS, preview_renderer


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("url", help="Page to preview")
    parser.add_argument(
        "--platform",
        choices=PLATFORMS,
        help="Print one platform card instead of the raw metadata",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Fetch timeout in seconds (default from settings)",
    )
    return parser.parse_args(argv)


async def preview(url: str, platform: str | None, timeout: float | None) -> dict:
    service = ExtractionService(fetcher=BoundedFetcher(timeout=timeout))
    metadata = await service.extract(url)
    if platform:
        return preview_renderer.render_platform(platform, metadata).model_dump(by_alias=True)
    return metadata.model_dump(by_alias=True)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        result = asyncio.run(preview(args.url, args.platform, args.timeout))
    except PreviewError as e:
        print(f"ERROR: {ExtractionService.user_message(e)}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
