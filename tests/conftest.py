"""
Shared pytest fixtures for PromoForge tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load Cloud Function modules with unique names at module load time
_site_scraper_module = _load_module_from_path(
    'site_scraper_main',
    PROJECT_ROOT / 'site-scraper' / 'main.py'
)

_video_renderer_module = _load_module_from_path(
    'video_renderer_main',
    PROJECT_ROOT / 'video-renderer' / 'main.py'
)

_voice_generator_module = _load_module_from_path(
    'voice_generator_main',
    PROJECT_ROOT / 'voice-generator' / 'main.py'
)


# ============================================================================
# Cloud Function Entry Points
# ============================================================================

@pytest.fixture
def scrape():
    """Returns scrape entry point from site-scraper."""
    return _site_scraper_module.scrape


@pytest.fixture
def scrape_multiple():
    """Returns scrape_multiple entry point from site-scraper."""
    return _site_scraper_module.scrape_multiple


@pytest.fixture
def render():
    """Returns render entry point from video-renderer."""
    return _video_renderer_module.render


@pytest.fixture
def render_status():
    """Returns render_status entry point from video-renderer."""
    return _video_renderer_module.render_status


@pytest.fixture
def voice_generator_module():
    """Returns the voice-generator module (for swapping its service handles)."""
    return _voice_generator_module


# ============================================================================
# Environment
# ============================================================================

SHOTSTACK_TEST_HOST = 'https://api.shotstack.test/stage'


@pytest.fixture
def shotstack_env(monkeypatch):
    """Configures Shotstack credentials against a test host."""
    monkeypatch.setenv('SHOTSTACK_API_KEY', 'test_shotstack_key')
    monkeypatch.setenv('SHOTSTACK_HOST', SHOTSTACK_TEST_HOST)
    monkeypatch.delenv('RENDER_CHECK_AUDIO_URLS', raising=False)
    return f'{SHOTSTACK_TEST_HOST}/render'


@pytest.fixture
def no_shotstack_env(monkeypatch):
    """Removes Shotstack credentials."""
    monkeypatch.delenv('SHOTSTACK_API_KEY', raising=False)


# ============================================================================
# Sample Data
# ============================================================================

@pytest.fixture
def sample_landing_html():
    """A landing page with og tags, a theme color and a mix of images."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Acme | Ship faster</title>
        <meta property="og:title" content="Acme - Ship faster">
        <meta property="og:description" content="The fastest way to ship.">
        <meta name="description" content="Generic description">
        <meta name="theme-color" content="#4F46E5">
        <meta property="og:image" content="/images/og-card.png">
        <meta name="twitter:image" content="https://cdn.acme.test/twitter-card.png">
        <link rel="icon" href="/favicon.ico">
    </head>
    <body>
        <img src="/favicon-32x32.png">
        <img src="/static/logo.svg">
        <img src="https://tracking.acme.test/pixel.gif">
        <img src="/a.png">
        <img src="/screens/dashboard.png">
        <img src="//cdn.acme.test/screens/reports.jpg">
        <img src="screens/settings.webp">
        <img src="/images/og-card.png">
    </body>
    </html>
    """


@pytest.fixture
def bare_html():
    """A page with none of the tags the extractor looks for."""
    return "<html><head></head><body><p>Hello</p></body></html>"


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST', path='/', args=None):
            self._json = json_data
            self.method = method
            self.path = path
            self.args = args or {}
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


@pytest.fixture
def render_payload():
    """Minimal valid render payload with one image clip."""
    return {
        'timeline': {
            'background': '#000000',
            'tracks': [
                {'clips': [{
                    'asset': {'type': 'image', 'src': 'https://acme.test/a.png'},
                    'start': 0,
                    'length': 3,
                    'fit': 'cover',
                    'effect': 'zoomIn',
                }]},
            ],
        },
        'output': {'format': 'mp4', 'resolution': 'hd'},
    }


def make_tts_payload(text, voice='Joanna'):
    """Render payload whose second track is a text-to-speech clip."""
    return {
        'timeline': {
            'background': '#000000',
            'tracks': [
                {'clips': [{'asset': {'type': 'image', 'src': 'https://acme.test/a.png'}, 'start': 0, 'length': 3}]},
                {'clips': [{
                    'asset': {'type': 'text-to-speech', 'text': text, 'voice': voice, 'language': 'en-US'},
                    'start': 0,
                    'length': 3,
                    'volume': 0.8,
                }]},
            ],
        },
        'output': {'format': 'mp4', 'resolution': 'hd'},
    }


@pytest.fixture
def tts_payload():
    """Factory for render payloads with a text-to-speech clip."""
    return make_tts_payload
