"""Orchestrates validation, fetching and extraction for one URL."""

import logging
from collections.abc import Callable

from social_preview.schemas.metadata import NormalizedMetadata
from social_preview.services.bounded_fetcher import BoundedFetcher
from social_preview.services.errors import (
    ConnectionRefused,
    FetchTimeout,
    HostNotFound,
    InvalidURL,
    NotHTML,
    PreviewError,
    PrivateAddressNotAllowed,
    SchemeNotAllowed,
    Unclassified,
    UpstreamHTTPError,
)
from social_preview.services.metadata_extractor import MetadataExtractor
from social_preview.services.url_validator import validate_url

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "We couldn't reach this URL. Was there a typo?"

USER_MESSAGES: dict[type[PreviewError], str] = {
    InvalidURL: "That doesn't look like a valid URL. Double-check for typos?",
    FetchTimeout: (
        "This site took too long to respond. It might be down, "
        "or the URL may be wrong."
    ),
    NotHTML: (
        "This URL didn't return an HTML page. Make sure it points to a website, "
        "not a file or API."
    ),
    HostNotFound: "We couldn't reach this site. Was there a typo in the URL?",
    ConnectionRefused: (
        "Connection refused. This site doesn't seem to be accepting requests "
        "right now."
    ),
    Unclassified: GENERIC_MESSAGE,
}


class ExtractionService:
    """Validator -> Fetcher -> Extractor, with a single error mapping step."""

    def __init__(
        self,
        fetcher: BoundedFetcher | None = None,
        extractor: MetadataExtractor | None = None,
        validator: Callable[[str], str] = validate_url,
    ):
        self.validator = validator
        self.fetcher = fetcher or BoundedFetcher(validator=validator)
        self.extractor = extractor or MetadataExtractor()

    async def extract(self, raw_url: str) -> NormalizedMetadata:
        """
        Run the pipeline for ``raw_url``.

        Raises a PreviewError subclass on failure. Unexpected exceptions are
        logged and re-raised as Unclassified.
        """
        try:
            url = self.validator(raw_url)
            html = await self.fetcher.fetch(url)
        except PreviewError as e:
            logger.info(f"Extraction failed for {raw_url!r}: {e.kind}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error fetching {raw_url!r}: {e}", exc_info=True)
            raise Unclassified(str(e)) from e

        return self.extractor.extract(html, url)

    @staticmethod
    def user_message(error: Exception) -> str:
        """Map a pipeline failure to the message shown to the user."""
        if isinstance(error, (SchemeNotAllowed, PrivateAddressNotAllowed)):
            return error.message
        if isinstance(error, UpstreamHTTPError):
            return (
                f"This site returned an error ({error.message}). "
                "It might be blocking automated requests."
            )
        return USER_MESSAGES.get(type(error), GENERIC_MESSAGE)
