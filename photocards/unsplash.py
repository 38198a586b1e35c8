"""
Minimal Unsplash client: search for photos and download their raw bytes.

Download URLs come out of a remote JSON payload, so they are only fetched
from public HTTP(S) hosts, and every redirect is checked again.
"""
from __future__ import annotations

import http.client
import ipaddress
import json
import logging
import socket
import urllib.request
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode, urlparse

from .config import UnsplashConfig
from .errors import UnsplashError

logger = logging.getLogger(__name__)

# Maximum image download size: 50 MB
_MAX_IMAGE_BYTES = 50 * 1024 * 1024

# URL fetch timeout in seconds
_URL_TIMEOUT = 30

# Unsplash refuses larger pages
_MAX_PER_PAGE = 30

_ALLOWED_IMAGE_MIMES = frozenset({
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/tiff",
})


@dataclass
class UnsplashUrls:
    full: str
    raw: str


@dataclass
class UnsplashPhoto:
    """One search result; only the fields the card pipeline needs."""

    width: int
    height: int
    urls: UnsplashUrls

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UnsplashPhoto":
        urls = data["urls"]
        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            urls=UnsplashUrls(full=str(urls["full"]), raw=str(urls["raw"])),
        )


def search_photos(query: str, config: UnsplashConfig) -> list[UnsplashPhoto]:
    """Run an Unsplash photo search and return the first page of results.

    Raises :class:`UnsplashError` when no access key is configured, the
    request fails, or the response is not a valid search payload.
    """
    if not config.access_key:
        raise UnsplashError("No Unsplash access key configured (unsplash.access_key).")

    per_page = max(1, min(_MAX_PER_PAGE, config.per_page))
    url = f"{config.api_url.rstrip('/')}/search/photos?" + urlencode(
        {"query": query, "per_page": per_page}
    )
    req = urllib.request.Request(
        url,
        headers={
            "Authorization": f"Client-ID {config.access_key}",
            "Accept-Version": "v1",
        },
    )
    logger.debug("Searching Unsplash: %s", url)
    try:
        with urllib.request.urlopen(req, timeout=_URL_TIMEOUT) as response:
            payload = json.loads(response.read())
    except (OSError, http.client.HTTPException) as exc:
        raise UnsplashError(f"Failed to fetch images from Unsplash: {exc}") from exc
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError alike
        raise UnsplashError(f"Unsplash returned an unreadable response: {exc}") from exc

    try:
        return [UnsplashPhoto.from_json(item) for item in payload["results"]]
    except (KeyError, TypeError, ValueError) as exc:
        raise UnsplashError(f"Unexpected Unsplash search response: {exc}") from exc


def download_photo(url: str) -> bytes:
    """Download one photo from a public host.

    Raises ``ValueError`` for a refused URL or redirect, a non-image
    response, or a body over the size limit, and ``OSError`` for network
    failures, including a connection that drops mid-body.
    """
    _validate_public_http_url(url)
    try:
        with _open(urllib.request.Request(url)) as response:
            _validate_public_http_url(response.geturl(), context="Final response URL")
            mime_type = response.headers.get_content_type()
            if mime_type not in _ALLOWED_IMAGE_MIMES:
                raise ValueError(f"Disallowed MIME type '{mime_type}' for image at {url}")
            # One byte past the limit tells an oversized body from an exact fit
            data = response.read(_MAX_IMAGE_BYTES + 1)
    except http.client.HTTPException as exc:
        raise OSError(f"Download of {url} broke off: {exc!r}") from exc

    if len(data) > _MAX_IMAGE_BYTES:
        raise ValueError(f"Image at {url} exceeds {_MAX_IMAGE_BYTES} byte limit")
    logger.debug("Downloaded %d bytes of %s from %s", len(data), mime_type, url)
    return data


# ---------------------------------------------------------------------------
# Host checks
# ---------------------------------------------------------------------------

def _open(req: urllib.request.Request):
    opener = urllib.request.build_opener(_SafeRedirectHandler())
    return opener.open(req, timeout=_URL_TIMEOUT)


class _SafeRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that rejects redirects to non-public hosts."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        _validate_public_http_url(newurl, context="Redirect target")
        return super().redirect_request(req, fp, code, msg, headers, newurl)


def _validate_public_http_url(url: str, *, context: str = "Image URL") -> None:
    """Raise ``ValueError`` unless *url* is HTTP(S) on a public host."""
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"{context} must use http/https: {url}")
    hostname = parsed.hostname or ""
    if not hostname:
        raise ValueError(f"{context} is missing a hostname: {url}")
    if _is_private_host(hostname):
        raise ValueError(f"{context} points at a non-public host: {hostname}")


def _is_private_host(hostname: str) -> bool:
    """Return True if *hostname* is, or resolves to, a non-public address.

    Unresolvable names count as private.
    """
    try:
        addresses = [ipaddress.ip_address(hostname)]
    except ValueError:
        try:
            infos = socket.getaddrinfo(hostname, None)
        except OSError:
            return True
        addresses = [ipaddress.ip_address(info[4][0]) for info in infos]
    return any(not addr.is_global or addr.is_multicast for addr in addresses)
