"""URL handling utilities."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlparse

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """Extract the host from a URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The lower-cased host without a ``www.`` prefix, or ``""`` if there is none.
    """
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        logger.warning(f"Could not parse url {url}")
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


def absolute_url(base_url: str, href: str | None) -> str | None:
    """Resolve a possibly relative link against the page it was found on."""
    if not href:
        return None
    href = href.strip()
    if href.startswith(("javascript:", "#", "mailto:")):
        return None
    return urljoin(base_url, href)
