"""
URL helpers shared by providers and checks.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

ELLIPSIS = "…"


def parse_scheme_and_host(url: str) -> tuple[str, Optional[str]]:
    """
    Return (scheme, hostname) for a URL.

    Unparsable URLs yield ("", None) rather than raising.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return "", None
    return parts.scheme.lower(), parts.hostname


def elide_data_uri(url: str, max_length: int = 100) -> str:
    """
    Shorten data: URIs for reporting. Other URLs are returned unchanged.
    """
    if not url.lower().startswith("data:") or len(url) <= max_length:
        return url
    return url[:max_length] + ELLIPSIS


def format_number(value: float) -> str:
    """Format a count with thousands separators, rounding to 0.1."""
    rounded = round(value, 1)
    if float(rounded).is_integer():
        return f"{int(rounded):,}"
    return f"{rounded:,.1f}"
