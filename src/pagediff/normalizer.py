"""
Canonicalization of text and URLs for comparison.

Every value that takes part in matching goes through these helpers so both
documents are compared on the same footing.
"""

import logging
import re
from urllib.parse import urljoin, urlparse

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(raw: str | None) -> str:
    """
    Trim text and collapse internal whitespace runs to a single space.

    Case is preserved, so the result is suitable for human-readable messages.
    """
    if not raw:
        return ""
    return _WHITESPACE_RE.sub(" ", raw).strip()


def normalize_text(raw: str | None) -> str:
    """
    Normalize text for comparison.

    Args:
        raw: Text to normalize; None is treated as empty

    Returns:
        Trimmed, whitespace-collapsed, lower-cased text
    """
    return collapse_whitespace(raw).lower()


def resolve_url(base_url: str | None, raw_url: str | None) -> str | None:
    """
    Resolve a URL against a document base URI.

    Args:
        base_url: Base URI of the owning document (may be None)
        raw_url: URL as written in the markup

    Returns:
        Absolute URL, or None when the input is missing or malformed
    """
    if raw_url is None:
        return None

    candidate = raw_url.strip()
    if not candidate:
        return None

    try:
        resolved = urljoin(base_url, candidate) if base_url else candidate
        # urlparse raises ValueError on e.g. unbalanced IPv6 brackets
        urlparse(resolved)
    except ValueError:
        logger.debug("Could not resolve URL %r against %r", raw_url, base_url)
        return None

    return resolved


def extract_file_name(url: str | None, base_url: str | None = None) -> str | None:
    """
    Extract the final non-empty path segment of a URL.

    Query string and fragment are ignored.

    Args:
        url: Image URL, absolute or relative to base_url
        base_url: Base URI used to resolve relative URLs

    Returns:
        File name, or None if the URL cannot be parsed or has no path segment
    """
    resolved = resolve_url(base_url, url)
    if resolved is None:
        return None

    try:
        path = urlparse(resolved).path
    except ValueError:
        return None

    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return None
    return segments[-1]


def extract_responsive_file_names(srcset: str | None, base_url: str | None = None) -> list[str]:
    """
    Extract file names from a responsive source-set attribute.

    Each comma-separated candidate contributes the file name of its URL token
    (the first whitespace-delimited token). Order is preserved and duplicates
    are dropped.

    Args:
        srcset: Value of a srcset attribute
        base_url: Base URI used to resolve relative URLs

    Returns:
        List of distinct file names
    """
    if not srcset:
        return []

    names: list[str] = []
    for candidate in srcset.split(","):
        tokens = candidate.split()
        if not tokens:
            continue
        name = extract_file_name(tokens[0], base_url)
        if name and name not in names:
            names.append(name)

    return names
