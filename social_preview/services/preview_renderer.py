"""Platform preview card layouts.

Produces display-ready plain text for each supported platform. Markup and
escaping are left to the client.
"""

from social_preview.schemas.metadata import NormalizedMetadata
from social_preview.schemas.preview import PreviewCard

DISCORD_DEFAULT_ACCENT = "#5865f2"
LARGE_IMAGE_CARD = "summary_large_image"

PLATFORMS = (
    "google",
    "facebook",
    "x",
    "linkedin",
    "discord",
    "slack",
    "imessage",
    "whatsapp",
)


def truncate(value: str, limit: int) -> str:
    if not value:
        return ""
    return value[:limit] + "..." if len(value) > limit else value


class PreviewRenderer:
    """Renders NormalizedMetadata into per-platform card data."""

    def render(self, meta: NormalizedMetadata) -> dict[str, PreviewCard]:
        return {platform: self.render_platform(platform, meta) for platform in PLATFORMS}

    def render_platform(self, platform: str, meta: NormalizedMetadata) -> PreviewCard:
        if platform not in PLATFORMS:
            raise ValueError(f"Unknown platform: {platform}")
        return getattr(self, f"_render_{platform}")(meta)

    def _render_google(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="google",
            title=truncate(meta.title, 70),
            tab_title=truncate(meta.title, 32),
            description=truncate(meta.description, 160),
            domain=meta.domain,
            favicon=meta.favicon,
        )

    def _render_facebook(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="facebook",
            title=truncate(meta.title, 100),
            description=truncate(meta.description, 110),
            domain=meta.domain,
            image=meta.image,
        )

    def _render_x(self, meta: NormalizedMetadata) -> PreviewCard:
        if meta.twitter_card == LARGE_IMAGE_CARD:
            return PreviewCard(
                platform="x",
                variant=LARGE_IMAGE_CARD,
                title=truncate(meta.title, 70),
                description=truncate(meta.description, 100),
                domain=meta.domain,
                image=meta.image,
            )
        return PreviewCard(
            platform="x",
            variant="summary",
            title=truncate(meta.title, 70),
            domain=meta.domain,
            image=meta.image,
        )

    def _render_linkedin(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="linkedin",
            title=truncate(meta.title, 100),
            domain=meta.domain,
            image=meta.image,
        )

    def _render_discord(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="discord",
            title=truncate(meta.title, 100),
            description=truncate(meta.description, 200),
            domain=meta.domain,
            image=meta.image,
            site_name=meta.site_name,
            url=meta.url,
            accent_color=meta.theme_color or DISCORD_DEFAULT_ACCENT,
        )

    def _render_slack(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="slack",
            title=truncate(meta.title, 100),
            description=truncate(meta.description, 200),
            domain=meta.domain,
            image=meta.image,
            site_name=meta.site_name or meta.domain,
        )

    def _render_imessage(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="imessage",
            title=truncate(meta.title, 80),
            domain=meta.domain,
            image=meta.image,
        )

    def _render_whatsapp(self, meta: NormalizedMetadata) -> PreviewCard:
        return PreviewCard(
            platform="whatsapp",
            title=truncate(meta.title, 80),
            description=truncate(meta.description, 120),
            domain=meta.domain,
            image=meta.image,
        )


preview_renderer = PreviewRenderer()
