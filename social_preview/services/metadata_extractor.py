"""Extract social-preview metadata from HTML."""

from dataclasses import dataclass
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from social_preview.schemas.metadata import NormalizedMetadata
from social_preview.services.url_validator import ALLOWED_SCHEMES, PATH_SAFE_CHARS

DEFAULT_TWITTER_CARD = "summary"
QUERY_SAFE_CHARS = PATH_SAFE_CHARS + "?"

FAVICON_SELECTOR = (
    'link[rel="icon"], link[rel="shortcut icon"], link[rel="apple-touch-icon"]'
)


@dataclass(frozen=True)
class MetaSource:
    """A ``<meta>`` element keyed by ``property`` or ``name``."""

    attr: str
    key: str

    @property
    def selector(self) -> str:
        return f'meta[{self.attr}="{self.key}"]'


def prop(key: str) -> MetaSource:
    return MetaSource("property", key)


def name(key: str) -> MetaSource:
    return MetaSource("name", key)


# Field -> sources in priority order; the first non-blank value wins.
FIELD_SOURCES: dict[str, tuple[MetaSource, ...]] = {
    "title": (
        prop("og:title"),
        name("og:title"),
        name("twitter:title"),
        prop("twitter:title"),
    ),
    "description": (
        prop("og:description"),
        name("og:description"),
        name("twitter:description"),
        prop("twitter:description"),
        name("description"),
    ),
    "image": (
        prop("og:image"),
        name("og:image"),
        name("twitter:image"),
        prop("twitter:image"),
        name("twitter:image:src"),
    ),
    "url": (
        prop("og:url"),
        name("og:url"),
    ),
    "site_name": (
        prop("og:site_name"),
        name("og:site_name"),
    ),
    "twitter_card": (
        name("twitter:card"),
        prop("twitter:card"),
    ),
    "theme_color": (
        name("theme-color"),
        prop("theme-color"),
    ),
}


def first_match(soup: BeautifulSoup, sources: tuple[MetaSource, ...]) -> str:
    """Return the trimmed value of the first source that has one, else ''."""
    for source in sources:
        tag = soup.select_one(source.selector)
        if tag is None:
            continue
        value = tag.get("content") or tag.get("value")
        if value and value.strip():
            return value.strip()
    return ""


def resolve_url(value: str, base_url: str) -> str:
    """Resolve ``value`` against ``base_url``; keep it verbatim if that fails.

    Path and query of http(s) results are percent-encoded the way browsers
    resolve them, so ``my image.png`` becomes ``my%20image.png``.
    """
    if not value:
        return ""
    try:
        joined = urljoin(base_url, value)
        parts = urlsplit(joined)
    except ValueError:
        return value

    if parts.scheme not in ALLOWED_SCHEMES:
        return joined
    return urlunsplit(
        parts._replace(
            path=quote(parts.path, safe=PATH_SAFE_CHARS),
            query=quote(parts.query, safe=QUERY_SAFE_CHARS),
        )
    )



def domain_of(url: str) -> str:
    """Hostname of ``url`` without one leading ``www.``."""
    try:
        hostname = urlsplit(url).hostname or ""
    except ValueError:
        return ""
    return hostname.removeprefix("www.")


class MetadataExtractor:
    """Builds NormalizedMetadata from a page. Never raises for bad markup."""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def extract(self, html: str, page_url: str) -> NormalizedMetadata:
        soup = BeautifulSoup(html, self.parser)
        values = {
            field: first_match(soup, sources)
            for field, sources in FIELD_SOURCES.items()
        }

        if not values["title"]:
            title_tag = soup.find("title")
            if title_tag:
                values["title"] = title_tag.get_text().strip()

        canonical_url = values["url"] or page_url

        favicon = ""
        icon = soup.select_one(FAVICON_SELECTOR)
        if icon is not None:
            favicon = (icon.get("href") or "").strip()

        return NormalizedMetadata(
            title=values["title"],
            description=values["description"],
            image=resolve_url(values["image"], page_url),
            url=canonical_url,
            site_name=values["site_name"],
            twitter_card=values["twitter_card"] or DEFAULT_TWITTER_CARD,
            theme_color=values["theme_color"],
            favicon=resolve_url(favicon, page_url),
            domain=domain_of(canonical_url),
        )
