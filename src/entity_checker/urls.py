"""URL well-formedness checks."""

from urllib.parse import urlsplit

# Values some services emit in place of a real identifier
PLACEHOLDER_URLS = frozenset({"null", "none", "undefined"})


def is_dirty_url(url: str | None) -> bool:
    """Tell whether a URL can't be used as an authoritative reference.

    A URL is dirty when it is absent, empty or blank, a known placeholder,
    contains whitespace, or does not parse with both a scheme and a location.

    Args:
        url: The URL to test

    Returns:
        True if the URL is dirty
    """
    if url is None or not isinstance(url, str):
        return True
    stripped = url.strip()
    if not stripped or stripped.lower() in PLACEHOLDER_URLS:
        return True
    if any(c.isspace() for c in url):
        return True
    try:
        parts = urlsplit(url)
    except ValueError:
        return True
    return not (parts.scheme and (parts.netloc or parts.path))


def dirty_url_reason(url: str | None) -> str:
    """Short explanation of why a URL is dirty, for failure messages."""
    if url is None:
        return "URL is missing"
    if not isinstance(url, str):
        return f"URL is not a string: {url!r}"
    if not url.strip():
        return "URL is empty"
    if url.strip().lower() in PLACEHOLDER_URLS:
        return f"URL is a placeholder: {url!r}"
    return f"URL is malformed: {url!r}"
