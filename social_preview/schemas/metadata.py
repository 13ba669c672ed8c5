"""Pydantic schemas for extracted page metadata."""

from pydantic import BaseModel, ConfigDict, Field


class NormalizedMetadata(BaseModel):
    """Social-preview metadata extracted from a single page.

    Serialized with camelCase keys (``siteName``, ``twitterCard``,
    ``themeColor``). Values are plain text; nothing here is escaped.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = ""
    description: str = ""
    image: str = ""
    url: str = ""
    site_name: str = Field("", alias="siteName")
    twitter_card: str = Field("summary", alias="twitterCard")
    theme_color: str = Field("", alias="themeColor")
    favicon: str = ""
    domain: str = ""


class ErrorResponse(BaseModel):
    """Schema for API error bodies."""

    error: str
