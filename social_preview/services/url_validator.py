"""URL validation and best-effort SSRF guard.

Only literal hostnames are checked. Names that resolve to private addresses
through DNS are not caught here.
"""

import ipaddress
import re
import socket
from urllib.parse import quote, urlsplit, urlunsplit

from social_preview.services.errors import (
    InvalidURL,
    PrivateAddressNotAllowed,
    SchemeNotAllowed,
)

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}

BLOCKED_HOSTNAMES = frozenset(
    {
        "localhost",
        "127.0.0.1",
        "0.0.0.0",
        "::1",
        "[::1]",
    }
)

PATH_SAFE_CHARS = "/%:@!$&'()*+,;=-._~"

# Shorthand IPv4 forms such as "127.1" or "0x7f.0.0.1" are canonicalized
# before the range checks, the same way browsers parse them.
_NUMERIC_HOST_RE = re.compile(r"^(0x[0-9a-f]*|\d+)(\.(0x[0-9a-f]*|\d+)){0,3}\.?$")
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s<>\"{}|\\^`%/?#@]")


def _canonical_ipv4(hostname: str) -> str:
    if not _NUMERIC_HOST_RE.match(hostname):
        return hostname
    try:
        return socket.inet_ntoa(socket.inet_aton(hostname.rstrip(".")))
    except OSError:
        return hostname


def _canonical_ipv6(hostname: str) -> str:
    """Compressed form of an IPv6 literal: "0:0:0:0:0:0:0:1" -> "::1"."""
    try:
        return ipaddress.IPv6Address(hostname).compressed
    except ValueError:
        raise InvalidURL("Invalid URL")


def _embedded_ipv4(hostname: str) -> str | None:
    """Dotted-quad behind an IPv4-mapped IPv6 literal (``::ffff:a.b.c.d``)."""
    if ":" not in hostname:
        return None
    mapped = ipaddress.IPv6Address(hostname).ipv4_mapped
    return str(mapped) if mapped is not None else None


def is_private_ipv4(hostname: str) -> bool:
    """Check a dotted-quad literal against private/reserved ranges."""
    parts = hostname.split(".")
    if len(parts) != 4 or not all(part.isdigit() for part in parts):
        return False

    a, b = int(parts[0]), int(parts[1])
    return (
        a == 10
        or (a == 172 and 16 <= b <= 31)
        or (a == 192 and b == 168)
        or a == 0
        or (a == 169 and b == 254)
    )


def validate_url(raw: str) -> str:
    """
    Validate user input and return the canonical absolute URL.

    Raises InvalidURL, SchemeNotAllowed or PrivateAddressNotAllowed.
    """
    try:
        parts = urlsplit(raw.strip())
        port = parts.port
    except (ValueError, AttributeError):
        raise InvalidURL("Invalid URL")

    scheme = parts.scheme.lower()
    if not scheme:
        raise InvalidURL("Invalid URL")

    if scheme not in ALLOWED_SCHEMES:
        raise SchemeNotAllowed("Only HTTP and HTTPS URLs are allowed")

    hostname = parts.hostname
    if not hostname or _FORBIDDEN_HOST_CHARS.search(hostname):
        raise InvalidURL("Invalid URL")

    hostname = hostname.lower()
    if ":" in hostname:
        hostname = _canonical_ipv6(hostname)
    else:
        hostname = _canonical_ipv4(hostname)

    # IPv4-mapped literals are checked as the IPv4 address they carry
    checked = _embedded_ipv4(hostname) or hostname

    if checked in BLOCKED_HOSTNAMES:
        raise PrivateAddressNotAllowed("Local/private URLs are not allowed")

    if is_private_ipv4(checked):
        raise PrivateAddressNotAllowed("Private IP addresses are not allowed")

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"

    userinfo = parts.netloc.rpartition("@")[0] if "@" in parts.netloc else ""
    netloc = f"{userinfo}@{host}" if userinfo else host

    path = quote(parts.path or "/", safe=PATH_SAFE_CHARS)
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))
