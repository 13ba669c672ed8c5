"""Pydantic schemas for platform preview cards."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from social_preview.schemas.metadata import NormalizedMetadata


class PreviewCard(BaseModel):
    """Display-ready fields for one platform layout.

    Serialized with camelCase keys, like NormalizedMetadata.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    platform: str
    variant: str = "default"
    title: str = ""
    tab_title: str | None = None
    description: str | None = None
    domain: str = ""
    image: str = ""
    favicon: str | None = None
    site_name: str | None = None
    url: str | None = None
    accent_color: str | None = None


class PreviewResponse(BaseModel):
    """Schema for the combined metadata + cards response."""

    metadata: NormalizedMetadata
    cards: dict[str, PreviewCard]
