"""Validation of user-supplied playlist and channel URLs."""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import urlsplit

import idna

from m3uscope.domain.entities import DEFAULT_LIMITS, InvalidInput

ALLOWED_SCHEMES = frozenset({"http", "https"})

_UNSAFE_CHARS_RE = re.compile(r"[<>\"'`]")
_WHITESPACE_RE = re.compile(r"[\s\x00-\x1f\x7f]")
_LABEL_RE = re.compile(r"^(?!-)[a-z0-9\u00a1-\uffff-]{1,63}(?<!-)$", re.IGNORECASE)
_TLD_RE = re.compile(r"^([a-z\u00a1-\uffff]{2,}|xn--[a-z0-9-]{2,59})$", re.IGNORECASE)

_INVALID_FORMAT = "Invalid URL format. Must start with http:// or https://"


def _is_valid_host(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass

    labels = host.rstrip(".").split(".")
    if len(labels) < 2:
        return False
    if not all(_LABEL_RE.match(label) for label in labels):
        return False
    if not _TLD_RE.match(labels[-1]):
        return False

    # Same IDNA encoding the resolver applies before DNS lookup
    try:
        idna.encode(".".join(labels), uts46=True)
    except UnicodeError:
        return False
    return True


def validate_url_format(
    url: object, max_length: int = DEFAULT_LIMITS.max_url_length
) -> str:
    """Validate and sanitize a URL before any network I/O.

    Requires an absolute ``http``/``https`` URL with a fully qualified host
    name or an IP address.

    Returns:
        The stripped URL with ``<>"'`` and backticks removed.

    Raises:
        InvalidInput: Missing, too long, malformed or non-HTTP(S) URL.
    """
    if not url or not isinstance(url, str):
        raise InvalidInput("URL is required", reason="url_required")

    trimmed = url.strip()
    if not trimmed:
        raise InvalidInput("URL is required", reason="url_required")
    if len(trimmed) > max_length:
        raise InvalidInput(
            f"URL exceeds maximum length of {max_length} characters",
            reason="url_too_long",
        )
    if _WHITESPACE_RE.search(trimmed):
        raise InvalidInput(_INVALID_FORMAT, reason="url_invalid_format")

    try:
        parts = urlsplit(trimmed)
        parts.port  # noqa: B018 - raises ValueError for a malformed port
    except ValueError as e:
        raise InvalidInput(_INVALID_FORMAT, reason="url_invalid_format") from e

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        if scheme and "://" in trimmed:
            raise InvalidInput(
                "Only HTTP and HTTPS protocols are allowed",
                reason="url_protocol_not_allowed",
            )
        raise InvalidInput(_INVALID_FORMAT, reason="url_invalid_format")

    host = parts.hostname
    if not host or not _is_valid_host(host):
        raise InvalidInput(_INVALID_FORMAT, reason="url_invalid_format")

    return _UNSAFE_CHARS_RE.sub("", trimmed)


def is_http_url(url: str) -> bool:
    """Return *True* for plain-HTTP (not HTTPS) URLs."""
    try:
        return urlsplit(url).scheme.lower() == "http"
    except ValueError:
        return False
