from social_preview.services.bounded_fetcher import BoundedFetcher, BoundedReader
from social_preview.services.extraction_service import ExtractionService
from social_preview.services.metadata_extractor import MetadataExtractor
from social_preview.services.preview_renderer import PreviewRenderer, preview_renderer
from social_preview.services.rate_limiter import RateLimiter, SlidingWindowRateLimiter
from social_preview.services.url_validator import validate_url

__all__ = [
    "BoundedFetcher",
    "BoundedReader",
    "ExtractionService",
    "MetadataExtractor",
    "PreviewRenderer",
    "preview_renderer",
    "RateLimiter",
    "SlidingWindowRateLimiter",
    "validate_url",
]
