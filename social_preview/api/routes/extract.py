"""Metadata extraction routes."""

from fastapi import APIRouter, Query, status

from social_preview.api.deps import ApiError, Extractor, RateLimited
from social_preview.schemas.metadata import ErrorResponse, NormalizedMetadata
from social_preview.schemas.preview import PreviewCard, PreviewResponse
from social_preview.services.errors import PreviewError
from social_preview.services.extraction_service import ExtractionService
from social_preview.services.preview_renderer import preview_renderer

router = APIRouter(prefix="/api", tags=["extract"], dependencies=[RateLimited])

MISSING_URL_MESSAGE = "URL parameter is required"

HTTP_422 = 422

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    HTTP_422: {"model": ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
}


async def _run_pipeline(service: ExtractionService, url: str | None) -> NormalizedMetadata:
    if not url:
        raise ApiError(status.HTTP_400_BAD_REQUEST, MISSING_URL_MESSAGE)

    try:
        return await service.extract(url)
    except PreviewError as e:
        raise ApiError(
            HTTP_422,
            ExtractionService.user_message(e),
        )


@router.get(
    "/extract",
    response_model=NormalizedMetadata,
    responses=ERROR_RESPONSES,
)
async def extract_metadata(
    service: Extractor,
    url: str | None = Query(None),
) -> NormalizedMetadata:
    """Fetch a page and return its social-preview metadata."""
    return await _run_pipeline(service, url)


@router.get(
    "/preview",
    response_model=PreviewResponse,
    responses=ERROR_RESPONSES,
)
async def preview_cards(
    service: Extractor,
    url: str | None = Query(None),
    platform: str | None = Query(None),
) -> PreviewResponse:
    """
    Fetch a page and lay out its metadata for each supported platform.

    Pass ``platform`` to get a single card back.
    """
    metadata = await _run_pipeline(service, url)

    if platform:
        try:
            card = preview_renderer.render_platform(platform, metadata)
        except ValueError as e:
            raise ApiError(status.HTTP_400_BAD_REQUEST, str(e))
        cards: dict[str, PreviewCard] = {platform: card}
    else:
        cards = preview_renderer.render(metadata)

    return PreviewResponse(metadata=metadata, cards=cards)
