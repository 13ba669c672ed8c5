"""Failure taxonomy for the extraction pipeline.

Every failure raised by the validator or the fetcher is a ``PreviewError``
subclass with a stable ``kind``. The extraction service maps kinds to the
messages shown to users.
"""


class PreviewError(Exception):
    """Base class for extraction pipeline failures."""

    kind = "Unclassified"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class InvalidURL(PreviewError):
    kind = "InvalidURL"


class SchemeNotAllowed(PreviewError):
    kind = "SchemeNotAllowed"


class PrivateAddressNotAllowed(PreviewError):
    kind = "PrivateAddressNotAllowed"


class FetchTimeout(PreviewError):
    kind = "Timeout"


class NotHTML(PreviewError):
    kind = "NotHTML"


class HostNotFound(PreviewError):
    kind = "HostNotFound"


class ConnectionRefused(PreviewError):
    kind = "ConnectionRefused"


class UpstreamHTTPError(PreviewError):
    """Non-2xx response from the remote site."""

    kind = "UpstreamHTTPError"

    def __init__(self, status: int, status_text: str = ""):
        super().__init__(f"HTTP {status}: {status_text}")
        self.status = status
        self.status_text = status_text


class Unclassified(PreviewError):
    kind = "Unclassified"
