"""
Unit tests for metadata extraction.

Pure HTML-in, dict-out functions; no network.
"""

import pytest

from promoforge.metadata_utils import (
    BATCH_MODE,
    DEFAULT_DESCRIPTION,
    DEFAULT_THEME_COLOR,
    DEFAULT_TITLE,
    PLACEHOLDER_SCREENSHOTS,
    SINGLE_MODE,
    extract_scraped_asset,
    extract_screenshots,
    extract_theme_color,
    failed_scraped_asset,
    get_meta_content,
    is_content_image,
    parse_html,
)

PAGE_URL = "https://acme.test/"


def _page(head="", body=""):
    return f"<html><head>{head}</head><body>{body}</body></html>"


class TestDefaults:
    """A page without any of the expected tags still yields a full asset."""

    def test_bare_page_single_mode(self, bare_html):
        asset = extract_scraped_asset(bare_html, PAGE_URL, SINGLE_MODE)

        assert asset['title'] == DEFAULT_TITLE
        assert asset['description'] == DEFAULT_DESCRIPTION
        assert asset['themeColor'] == DEFAULT_THEME_COLOR
        assert asset['screenshots'] == PLACEHOLDER_SCREENSHOTS[SINGLE_MODE]
        assert len(asset['screenshots']) == 3
        assert asset['url'] == PAGE_URL

    def test_bare_page_batch_mode(self, bare_html):
        asset = extract_scraped_asset(bare_html, PAGE_URL, BATCH_MODE)
        assert asset['screenshots'] == PLACEHOLDER_SCREENSHOTS[BATCH_MODE]
        assert len(asset['screenshots']) == 1

    def test_empty_html(self):
        asset = extract_scraped_asset("", PAGE_URL)
        assert asset['title'] == DEFAULT_TITLE
        assert len(asset['screenshots']) == 3

    def test_malformed_html_does_not_raise(self):
        asset = extract_scraped_asset("<html><head><title>Broken</head><body><img src='/screens/x.png'><p>unclosed", PAGE_URL)
        assert asset['title']
        assert asset['screenshots']


class TestTitleAndDescription:

    def test_og_title_wins_over_title_tag(self, sample_landing_html):
        asset = extract_scraped_asset(sample_landing_html, PAGE_URL)
        assert asset['title'] == "Acme - Ship faster"

    def test_title_tag_fallback(self):
        html = _page('<title>  Pricing | Acme  </title>')
        assert extract_scraped_asset(html, PAGE_URL)['title'] == "Pricing | Acme"

    def test_empty_og_title_falls_back(self):
        html = _page('<meta property="og:title" content=""><title>Real Title</title>')
        assert extract_scraped_asset(html, PAGE_URL)['title'] == "Real Title"

    def test_og_description_wins(self, sample_landing_html):
        asset = extract_scraped_asset(sample_landing_html, PAGE_URL)
        assert asset['description'] == "The fastest way to ship."

    def test_meta_description_fallback(self):
        html = _page('<meta name="description" content="Plain description">')
        assert extract_scraped_asset(html, PAGE_URL)['description'] == "Plain description"

    def test_meta_match_is_case_insensitive(self):
        soup = parse_html(_page('<meta property="OG:Title" content="Loud">'))
        assert get_meta_content(soup, 'og:title') == "Loud"

    def test_name_attribute_also_matches(self):
        soup = parse_html(_page('<meta name="og:title" content="By name">'))
        assert get_meta_content(soup, 'og:title') == "By name"

    def test_name_matches_when_property_differs(self):
        soup = parse_html(_page('<meta property="og:site_name" name="og:title" content="Both attrs">'))
        assert get_meta_content(soup, 'og:title') == "Both attrs"
        assert get_meta_content(soup, 'og:site_name') == "Both attrs"

    def test_missing_meta_returns_empty(self):
        soup = parse_html(_page())
        assert get_meta_content(soup, 'og:title') == ''


class TestThemeColor:
    """Theme color is either a strict #RRGGBB value or black."""

    @pytest.mark.parametrize("value", ["#4F46E5", "#4f46e5", "#000000", "#ABCdef"])
    def test_valid_colors_kept(self, value):
        soup = parse_html(_page(f'<meta name="theme-color" content="{value}">'))
        assert extract_theme_color(soup) == value

    @pytest.mark.parametrize("value", ["#fff", "red", "#12345G", "#1234567", "4F46E5", "rgb(0,0,0)", "#4F46E5 "])
    def test_invalid_colors_default(self, value):
        soup = parse_html(_page(f'<meta name="theme-color" content="{value}">'))
        assert extract_theme_color(soup) == DEFAULT_THEME_COLOR

    def test_missing_theme_color(self):
        assert extract_theme_color(parse_html(_page())) == DEFAULT_THEME_COLOR


class TestIsContentImage:

    @pytest.mark.parametrize("src", [
        "/favicon-32x32.png",
        "/static/app-icon.png",
        "/static/logo.svg",
        "/images/hero.svg",
        "https://example.com/pixel.gif",
        "https://tracking.example.com/t.png",
        "/a.png",
        "",
    ])
    def test_rejected(self, src):
        assert is_content_image(src) is False

    @pytest.mark.parametrize("src", [
        "/screens/dashboard.png",
        "https://cdn.example.com/hero.jpg",
        "images/team.webp",
        "/static/logo.png",
    ])
    def test_accepted(self, src):
        assert is_content_image(src) is True


class TestExtractScreenshots:

    def test_landing_page_precedence(self, sample_landing_html):
        shots = extract_screenshots(parse_html(sample_landing_html), PAGE_URL, SINGLE_MODE)

        assert shots == [
            "https://acme.test/images/og-card.png",
            "https://cdn.acme.test/twitter-card.png",
            "https://acme.test/screens/dashboard.png",
            "https://cdn.acme.test/screens/reports.jpg",
            "https://acme.test/screens/settings.webp",
        ]

    def test_all_screenshots_absolute_and_unique(self, sample_landing_html):
        shots = extract_screenshots(parse_html(sample_landing_html), PAGE_URL, SINGLE_MODE)
        assert all(s.startswith("https://") for s in shots)
        assert len(shots) == len(set(shots))

    def test_twitter_image_same_as_og_is_deduplicated(self):
        html = _page(
            '<meta property="og:image" content="https://acme.test/card.png">'
            '<meta name="twitter:image" content="/card.png">'
        )
        shots = extract_screenshots(parse_html(html), PAGE_URL, SINGLE_MODE)
        assert shots == ["https://acme.test/card.png"]

    def test_single_mode_caps_at_ten(self):
        body = "".join(f'<img src="/screens/shot-{i}.png">' for i in range(15))
        shots = extract_screenshots(parse_html(_page(body=body)), PAGE_URL, SINGLE_MODE)
        assert len(shots) == 10
        assert shots[0] == "https://acme.test/screens/shot-0.png"

    def test_batch_mode_caps_at_five(self):
        body = "".join(f'<img src="/screens/shot-{i}.png">' for i in range(15))
        shots = extract_screenshots(parse_html(_page(body=body)), PAGE_URL, BATCH_MODE)
        assert len(shots) == 5

    def test_og_image_counts_toward_cap(self):
        head = '<meta property="og:image" content="/og.png">'
        body = "".join(f'<img src="/screens/shot-{i}.png">' for i in range(15))
        shots = extract_screenshots(parse_html(_page(head, body)), PAGE_URL, BATCH_MODE)
        assert len(shots) == 5
        assert shots[0] == "https://acme.test/og.png"

    def test_fallback_uses_filtered_images_when_nothing_else(self):
        body = '<img src="/static/logo.svg"><img src="/favicon.ico">'
        shots = extract_screenshots(parse_html(_page(body=body)), PAGE_URL, SINGLE_MODE)
        assert shots == ["https://acme.test/static/logo.svg", "https://acme.test/favicon.ico"]

    def test_fallback_cap_single(self):
        body = "".join(f'<img src="/icons/icon-{i}.png">' for i in range(8))
        shots = extract_screenshots(parse_html(_page(body=body)), PAGE_URL, SINGLE_MODE)
        assert len(shots) == 5

    def test_fallback_cap_batch(self):
        body = "".join(f'<img src="/icons/icon-{i}.png">' for i in range(8))
        shots = extract_screenshots(parse_html(_page(body=body)), PAGE_URL, BATCH_MODE)
        assert len(shots) == 3

    def test_img_without_src_ignored(self):
        body = '<img alt="no source"><img src="">'
        shots = extract_screenshots(parse_html(_page(body=body)), PAGE_URL, BATCH_MODE)
        assert shots == PLACEHOLDER_SCREENSHOTS[BATCH_MODE]

    def test_relative_path_resolved_against_page(self):
        body = '<img src="img/screenshot.png">'
        shots = extract_screenshots(parse_html(_page(body=body)), "https://acme.test/blog/post", SINGLE_MODE)
        assert shots == ["https://acme.test/blog/img/screenshot.png"]


class TestExtractScrapedAsset:

    def test_landing_page_end_to_end(self, sample_landing_html):
        asset = extract_scraped_asset(sample_landing_html, PAGE_URL, SINGLE_MODE)

        assert asset == {
            'title': "Acme - Ship faster",
            'description': "The fastest way to ship.",
            'screenshots': [
                "https://acme.test/images/og-card.png",
                "https://cdn.acme.test/twitter-card.png",
                "https://acme.test/screens/dashboard.png",
                "https://cdn.acme.test/screens/reports.jpg",
                "https://acme.test/screens/settings.webp",
            ],
            'themeColor': "#4F46E5",
            'url': PAGE_URL,
        }

    def test_og_image_only_page(self):
        html = '<html><head><meta property="og:title" content="Acme"><meta property="og:image" content="/img.png"></head></html>'
        asset = extract_scraped_asset(html, PAGE_URL, SINGLE_MODE)

        assert asset['title'] == "Acme"
        assert asset['screenshots'] == ["https://acme.test/img.png"]
        assert asset['description'] == DEFAULT_DESCRIPTION
        assert asset['themeColor'] == DEFAULT_THEME_COLOR


class TestFailedScrapedAsset:

    def test_failed_asset_shape(self):
        asset = failed_scraped_asset("https://down.test/", "Request timed out")
        assert asset['title'] == "Failed to scrape"
        assert asset['description'] == "Error: Request timed out"
        assert asset['screenshots'] == []
        assert asset['themeColor'] == DEFAULT_THEME_COLOR
        assert asset['url'] == "https://down.test/"

    def test_failed_asset_without_message(self):
        asset = failed_scraped_asset("https://down.test/", None)
        assert asset['description'] == "Error: Unknown error"
