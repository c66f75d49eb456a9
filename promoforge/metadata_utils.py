"""
Metadata extraction for PromoForge.

Turns a page's HTML into a ScrapedAsset: title, description, theme color and
a list of absolute screenshot URLs for the video.

Screenshot precedence (first source wins a slot):
1. og:image
2. twitter:image (if it resolves to a different URL)
3. <img src> in document order, skipping icons, logos, trackers and SVGs
4. any <img src> at all, up to a smaller cap, if step 3 found nothing
5. placeholder images, so the result is never empty

Extraction never raises: a missing tag resolves to its documented default.
"""

import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from .url_utils import resolve_url

SINGLE_MODE = 'single'
BATCH_MODE = 'batch'

DEFAULT_TITLE = 'Untitled'
DEFAULT_DESCRIPTION = 'No description available'
DEFAULT_THEME_COLOR = '#000000'

THEME_COLOR_PATTERN = re.compile(r'#[0-9A-F]{6}', re.I)

# Substrings that mark an <img> as chrome rather than content
SKIPPED_IMAGE_PATTERNS = ['favicon', 'icon', 'logo.svg', 'pixel', 'tracking']
MIN_IMAGE_SRC_LENGTH = 11

# Per-mode limits: (max screenshots, max unfiltered fallback images)
SCREENSHOT_LIMITS = {
    SINGLE_MODE: (10, 5),
    BATCH_MODE: (5, 3),
}

PLACEHOLDER_SCREENSHOTS = {
    SINGLE_MODE: [
        'https://via.placeholder.com/800x600/4F46E5/FFFFFF?text=Screenshot+1',
        'https://via.placeholder.com/800x600/7C3AED/FFFFFF?text=Screenshot+2',
        'https://via.placeholder.com/800x600/DC2626/FFFFFF?text=Screenshot+3',
    ],
    BATCH_MODE: [
        'https://via.placeholder.com/800x600/4F46E5/FFFFFF?text=App+Screenshot',
    ],
}


def parse_html(html: str) -> BeautifulSoup:
    """Parse HTML leniently. Never raises on malformed markup."""
    return BeautifulSoup(html or '', 'html.parser')


def get_meta_content(soup: BeautifulSoup, key: str) -> str:
    """
    Get the content of the first <meta> whose property or name equals key.

    Matching is case-insensitive. Returns '' if no tag matches or the
    matching tag has no content.
    """
    if not soup:
        return ''

    key = key.lower()
    for meta in soup.find_all('meta'):
        for attr in ('property', 'name'):
            value = meta.get(attr) or ''
            if isinstance(value, list):
                value = ' '.join(value)
            if value.strip().lower() == key:
                break
        else:
            continue

        content = meta.get('content')
        if content:
            return content
    return ''


def extract_title(soup: BeautifulSoup) -> str:
    """og:title, then <title>, then 'Untitled'."""
    og_title = get_meta_content(soup, 'og:title')
    if og_title:
        return og_title

    title_tag = soup.find('title') if soup else None
    if title_tag:
        text = title_tag.get_text(strip=True)
        if text:
            return text

    return DEFAULT_TITLE


def extract_description(soup: BeautifulSoup) -> str:
    """og:description, then meta description, then a fixed default."""
    return (
        get_meta_content(soup, 'og:description') or
        get_meta_content(soup, 'description') or
        DEFAULT_DESCRIPTION
    )


def extract_theme_color(soup: BeautifulSoup) -> str:
    """theme-color meta if it is a strict #RRGGBB value, else black."""
    theme_color = get_meta_content(soup, 'theme-color')
    if theme_color and THEME_COLOR_PATTERN.fullmatch(theme_color):
        return theme_color
    return DEFAULT_THEME_COLOR


def is_content_image(src: str) -> bool:
    """Check that an <img src> looks like page content rather than an icon or tracker."""
    if not src or len(src) < MIN_IMAGE_SRC_LENGTH:
        return False
    if src.endswith('.svg'):
        return False
    for pattern in SKIPPED_IMAGE_PATTERNS:
        if pattern in src:
            return False
    return True


def _image_sources(soup: BeautifulSoup) -> List[str]:
    """All non-empty <img src> values in document order."""
    if not soup:
        return []
    sources = []
    for img in soup.find_all('img'):
        src = img.get('src')
        if isinstance(src, str) and src.strip():
            sources.append(src.strip())
    return sources


def extract_screenshots(soup: BeautifulSoup, page_url: str, mode: str = SINGLE_MODE) -> List[str]:
    """
    Collect absolute screenshot URLs for a page.

    Args:
        soup: Parsed page
        page_url: URL the page was fetched from (for resolving relative URLs)
        mode: 'single' (up to 10, 3 placeholders) or 'batch' (up to 5, 1 placeholder)

    Returns:
        Non-empty list of unique absolute URLs
    """
    max_screenshots, max_fallback = SCREENSHOT_LIMITS[mode]
    screenshots: List[str] = []

    def add(src: str, limit: int):
        if len(screenshots) >= limit:
            return
        absolute = resolve_url(src, page_url)
        if absolute not in screenshots:
            screenshots.append(absolute)

    og_image = get_meta_content(soup, 'og:image')
    if og_image:
        add(og_image, max_screenshots)

    twitter_image = get_meta_content(soup, 'twitter:image')
    if twitter_image:
        add(twitter_image, max_screenshots)

    sources = _image_sources(soup)
    for src in sources:
        if is_content_image(src):
            add(src, max_screenshots)

    # Nothing usable after filtering - take whatever images the page has
    if not screenshots:
        for src in sources:
            add(src, max_fallback)

    if not screenshots:
        screenshots.extend(PLACEHOLDER_SCREENSHOTS[mode])

    return screenshots[:max_screenshots]


def extract_scraped_asset(html: str, url: str, mode: str = SINGLE_MODE) -> Dict[str, object]:
    """Build a ScrapedAsset dict from a page's HTML."""
    soup = parse_html(html)
    return {
        'title': extract_title(soup),
        'description': extract_description(soup),
        'screenshots': extract_screenshots(soup, url, mode),
        'themeColor': extract_theme_color(soup),
        'url': url,
    }


def failed_scraped_asset(url: str, error: Optional[str]) -> Dict[str, object]:
    """Placeholder asset for a URL that could not be scraped."""
    return {
        'title': 'Failed to scrape',
        'description': f"Error: {error or 'Unknown error'}",
        'screenshots': [],
        'themeColor': DEFAULT_THEME_COLOR,
        'url': url,
    }
