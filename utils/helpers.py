"""
Utility functions and helpers for the LLM Brand Visibility Service.

Domain-string normalization and small text helpers shared by the
validation layer, the pipeline and the logs.
"""

import math
import re
from typing import Optional

import tldextract

_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)

_SUFFIX_EXTRACTOR = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def strip_domain_prefixes(domain: str) -> str:
    """
    Remove the protocol and ``www.`` prefix from a domain string.

    Case and any path are left untouched.

    Example:
        >>> strip_domain_prefixes("https://www.Acme.com")
        'Acme.com'
    """
    return _WWW_RE.sub("", _PROTOCOL_RE.sub("", domain))


def normalize_domain(domain: Optional[str]) -> str:
    """
    Normalize a domain for comparison and prompting.

    Trims whitespace, lower-cases, removes protocol, ``www.`` prefix,
    path and query parameters.

    Args:
        domain: Raw domain or URL string

    Returns:
        str: Bare lower-cased domain, or empty string if None

    Example:
        >>> normalize_domain("  https://www.Acme.com/about ")
        'acme.com'
    """
    if not domain:
        return ""

    normalized = strip_domain_prefixes(domain.strip().lower())

    # Remove path and query parameters
    return normalized.split("/")[0].split("?")[0]


def registrable_label(domain: str) -> str:
    """
    Return the label just before the public suffix.

    Uses the bundled public suffix snapshot, so no network fetch happens.

    Example:
        >>> registrable_label("docs.acme.co.uk")
        'acme'
    """
    normalized = normalize_domain(domain)
    if not normalized:
        return ""
    extracted = _SUFFIX_EXTRACTOR(normalized)
    if extracted.suffix:
        return extracted.domain

    # Unlisted suffix: treat the last label as the TLD
    labels = normalized.split(".")
    return labels[-2] if len(labels) > 1 else ""


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding; scores are published with
    half-up rounding (62.5 -> 63).
    """
    return int(math.floor(value + 0.5))


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length with optional suffix.

    Args:
        text: Text to truncate
        max_length: Maximum length of the output (default: 100)
        suffix: Suffix to append when truncating (default: "...")

    Returns:
        str: Truncated text with suffix if needed

    Example:
        >>> truncate_text("This is a very long text", max_length=10)
        'This is...'
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
