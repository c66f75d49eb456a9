"""
Site scraping for PromoForge.

scrape_url() fetches one page and extracts its ScrapedAsset; failures raise.
scrape_all() runs scrape_url() concurrently for up to 10 URLs and degrades
each failure to a placeholder asset, so one bad URL never sinks the batch.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

import requests

from .errors import NetworkError, PromoForgeError, ScrapeFailedError, UpstreamError, ValidationError
from .metadata_utils import BATCH_MODE, SINGLE_MODE, extract_scraped_asset, failed_scraped_asset
from .url_utils import is_absolute_url

USER_AGENT = 'Mozilla/5.0 (compatible; PromoForge/1.0; +https://promoforge.app)'
MAX_BATCH_URLS = 10


def get_scrape_timeout() -> float:
    """Request timeout for page fetches, from SCRAPE_TIMEOUT_SECONDS (default 30)."""
    return float(os.environ.get('SCRAPE_TIMEOUT_SECONDS', '30'))


def validate_url(url) -> str:
    """Check that url is a non-empty absolute URL. Returns it unchanged."""
    if not url or not isinstance(url, str):
        raise ValidationError('URL is required')
    if not is_absolute_url(url):
        raise ValidationError('Invalid URL format')
    return url


def fetch_webpage(url: str) -> str:
    """
    Fetch a page's HTML.

    Raises:
        UpstreamError: the site answered with a non-2xx status
        NetworkError: the site could not be reached or timed out
    """
    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    }

    try:
        response = requests.get(url, headers=headers, timeout=get_scrape_timeout(), allow_redirects=True)
        response.raise_for_status()
        return response.text
    except requests.exceptions.Timeout:
        raise NetworkError('Request timed out')
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code
        raise UpstreamError(
            f'Failed to fetch URL: {status} {e.response.reason or ""}'.strip(),
            status_code=status,
        )
    except requests.exceptions.RequestException as e:
        raise NetworkError(f'Request failed: {str(e)}')


def scrape_url(url: str, mode: str = SINGLE_MODE) -> Dict[str, object]:
    """Fetch one URL and extract its ScrapedAsset. Raises on any failure."""
    validate_url(url)
    print(f"Scraping URL: {url}")

    html = fetch_webpage(url)
    asset = extract_scraped_asset(html, url, mode)

    print(f"Scraped: {asset['title']} ({len(asset['screenshots'])} screenshots)")
    return asset


def scrape_or_placeholder(url: str) -> Dict[str, object]:
    """Batch-mode scrape: any failure becomes a placeholder asset."""
    try:
        return scrape_url(url, BATCH_MODE)
    except PromoForgeError as e:
        print(f"Failed to scrape {url}: {e.message}")
        return failed_scraped_asset(url, e.message)
    except Exception as e:
        print(f"Failed to scrape {url}: {e}")
        return failed_scraped_asset(url, str(e))


def validate_batch_urls(urls) -> List[str]:
    """Reject a batch before any network I/O if it is empty or too large."""
    if not urls or not isinstance(urls, list):
        raise ValidationError('URLs array is required')
    if len(urls) > MAX_BATCH_URLS:
        raise ValidationError(f'Maximum {MAX_BATCH_URLS} URLs allowed')
    return urls


def scrape_all(urls: List[str]) -> List[Dict[str, object]]:
    """
    Scrape up to 10 URLs concurrently.

    Returns exactly one asset per input URL, in input order. Failed URLs
    come back as placeholders with no screenshots.
    """
    validate_batch_urls(urls)
    print(f"Scraping {len(urls)} URLs...")

    with ThreadPoolExecutor(max_workers=len(urls)) as executor:
        return list(executor.map(scrape_or_placeholder, urls))


def filter_scraped_assets(results: List[Dict[str, object]]) -> List[Dict[str, object]]:
    """
    Drop assets without screenshots.

    Raises:
        ScrapeFailedError: no asset had any screenshots
    """
    successful = [result for result in results if result['screenshots']]
    if not successful:
        raise ScrapeFailedError('Failed to scrape any URLs successfully')

    print(f"Successfully scraped {len(successful)}/{len(results)} URLs")
    return successful
