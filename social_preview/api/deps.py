"""API dependencies: client identity, rate limiting and service lookup."""

import logging
from typing import Annotated

from fastapi import Depends, Request, status

from social_preview.config import settings
from social_preview.services.extraction_service import ExtractionService
from social_preview.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Try again in a minute."


class ApiError(Exception):
    """Rendered as ``{"error": message}`` with ``status_code``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def get_client_id(request: Request) -> str:
    """Identify the caller for rate limiting."""
    if settings.trust_forwarded_for:
        # Check X-Forwarded-For first (for proxies/load balancers)
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_extraction_service(request: Request) -> ExtractionService:
    return request.app.state.extraction_service


async def enforce_rate_limit(
    client_id: Annotated[str, Depends(get_client_id)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Reject the request with 429 when the client's window is full."""
    if not limiter.allow(client_id):
        logger.warning(f"Rate limit exceeded for {client_id}")
        raise ApiError(status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMIT_MESSAGE)


RateLimited = Depends(enforce_rate_limit)
Extractor = Annotated[ExtractionService, Depends(get_extraction_service)]
