"""
Site Scraper Cloud Functions

Fetch marketing pages and extract what a promo video needs.

Entry points:
- scrape: one URL -> ScrapedAsset (POST /scrape)
- scrape_multiple: up to 10 URLs -> ScrapedAssets (POST /scrape-multiple)

Responsibilities:
- Fetch webpage HTML
- Extract title, description, theme color and screenshots
- Degrade failed URLs to placeholders in batch mode

Does NOT:
- Render video (video-renderer's job)
- Retry failed fetches
"""

import os
import sys

import functions_framework

# Add shared package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from promoforge.errors import ValidationError
from promoforge.http_utils import error_response, get_request_json, json_response, preflight_response
from promoforge.metadata_utils import SINGLE_MODE
from promoforge.scraper import filter_scraped_assets, scrape_all, scrape_url


@functions_framework.http
def scrape(request):
    """
    Scrape a single URL.

    Expected JSON input:
    {
        "url": "https://example.com"
    }
    """
    if request.method == 'OPTIONS':
        return preflight_response('POST')

    try:
        request_json = get_request_json(request) or {}
        url = request_json.get('url') if isinstance(request_json, dict) else None

        asset = scrape_url(url, SINGLE_MODE)

        return json_response({'success': True, 'data': asset})

    except Exception as e:
        print(f"Scrape error: {e}")
        return error_response(e, 'success', 'Failed to scrape URL')


@functions_framework.http
def scrape_multiple(request):
    """
    Scrape up to 10 URLs concurrently.

    Expected JSON input:
    {
        "urls": ["https://example.com", "https://example.org"]
    }

    URLs that fail are dropped from the result; the call fails only if
    none of them produced screenshots.
    """
    if request.method == 'OPTIONS':
        return preflight_response('POST')

    try:
        request_json = get_request_json(request)
        if not isinstance(request_json, dict):
            raise ValidationError('URLs array is required')

        results = scrape_all(request_json.get('urls'))
        successful = filter_scraped_assets(results)

        return json_response({'success': True, 'data': successful})

    except Exception as e:
        print(f"Scrape multiple error: {e}")
        return error_response(e, 'success', 'Failed to scrape URLs')
