from social_preview.schemas.metadata import ErrorResponse, NormalizedMetadata
from social_preview.schemas.preview import PreviewCard, PreviewResponse

__all__ = [
    "ErrorResponse",
    "NormalizedMetadata",
    "PreviewCard",
    "PreviewResponse",
]
