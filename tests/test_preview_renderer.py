import pytest

from social_preview.schemas.metadata import NormalizedMetadata
from social_preview.services.preview_renderer import PLATFORMS, PreviewRenderer, truncate


@pytest.fixture()
def meta() -> NormalizedMetadata:
    return NormalizedMetadata(
        title="A" * 120,
        description="D" * 250,
        image="https://example.com/cover.png",
        url="https://www.example.com/post",
        favicon="https://example.com/favicon.ico",
        domain="example.com",
    )


def test_truncate():
    assert truncate("", 5) == ""
    assert truncate("short", 5) == "short"
    assert truncate("longer", 5) == "longe..."


def test_renders_every_platform(meta):
    cards = PreviewRenderer().render(meta)
    assert list(cards) == list(PLATFORMS)
    assert all(card.platform == platform for platform, card in cards.items())


def test_google_card(meta):
    card = PreviewRenderer().render_platform("google", meta)

    assert card.title == "A" * 70 + "..."
    assert card.tab_title == "A" * 32 + "..."
    assert card.description == "D" * 160 + "..."
    assert card.favicon == meta.favicon


def test_x_card_variants(meta):
    renderer = PreviewRenderer()

    summary = renderer.render_platform("x", meta)
    assert summary.variant == "summary"
    assert summary.description is None

    large = renderer.render_platform(
        "x", meta.model_copy(update={"twitter_card": "summary_large_image"})
    )
    assert large.variant == "summary_large_image"
    assert large.description == "D" * 100 + "..."


def test_discord_accent_defaults_to_brand_color(meta):
    renderer = PreviewRenderer()
    assert renderer.render_platform("discord", meta).accent_color == "#5865f2"

    themed = meta.model_copy(update={"theme_color": "#123456"})
    assert renderer.render_platform("discord", themed).accent_color == "#123456"


def test_slack_site_name_falls_back_to_domain(meta):
    renderer = PreviewRenderer()
    assert renderer.render_platform("slack", meta).site_name == "example.com"

    named = meta.model_copy(update={"site_name": "Example Blog"})
    assert renderer.render_platform("slack", named).site_name == "Example Blog"


def test_unknown_platform_rejected(meta):
    with pytest.raises(ValueError):
        PreviewRenderer().render_platform("myspace", meta)


def test_cards_serialize_with_camel_case_keys(meta):
    card = PreviewRenderer().render_platform("google", meta)
    assert set(card.model_dump(by_alias=True)) == {
        "platform",
        "variant",
        "title",
        "tabTitle",
        "description",
        "domain",
        "image",
        "favicon",
        "siteName",
        "url",
        "accentColor",
    }
