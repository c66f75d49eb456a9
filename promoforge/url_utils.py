"""
URL utilities for PromoForge.

Image and meta tag URLs found in scraped pages are often relative.
Everything handed to the renderer must be absolute, so every URL goes
through resolve_url() before it is stored.
"""

from urllib.parse import urljoin, urlparse


def resolve_url(url: str, base_url: str) -> str:
    """
    Resolve a URL found in markup against the page it came from.

    Args:
        url: The URL string as it appears in the page
        base_url: The URL of the page itself

    Returns:
        Absolute URL, or the original string if it cannot be resolved

    Examples:
        >>> resolve_url("https://cdn.example.com/a.png", "https://example.com/")
        'https://cdn.example.com/a.png'

        >>> resolve_url("//cdn.example.com/a.png", "https://example.com/")
        'https://cdn.example.com/a.png'

        >>> resolve_url("/img/a.png", "https://example.com/blog/post")
        'https://example.com/img/a.png'

        >>> resolve_url("a.png", "https://example.com/blog/post")
        'https://example.com/blog/a.png'
    """
    try:
        if url.startswith('http://') or url.startswith('https://'):
            return url

        base = urlparse(base_url)
        if not base.scheme or not base.netloc:
            raise ValueError(f"Base URL is not absolute: {base_url}")

        if url.startswith('//'):
            return f"{base.scheme}:{url}"

        if url.startswith('/'):
            return f"{base.scheme}://{base.netloc}{url}"

        return urljoin(base_url, url)
    except Exception:
        return url


def is_absolute_url(url) -> bool:
    """Check that a string parses as an absolute URL with scheme and host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)
