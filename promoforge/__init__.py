"""Shared code for the PromoForge Cloud Functions and CLI."""

from .errors import (
    PromoForgeError,
    ValidationError,
    ScrapeFailedError,
    UpstreamError,
    NetworkError,
    ConfigurationError,
    RenderTimeoutError,
)

from .url_utils import (
    resolve_url,
    is_absolute_url,
)

from .metadata_utils import (
    SINGLE_MODE,
    BATCH_MODE,
    extract_scraped_asset,
    failed_scraped_asset,
)

from .scraper import (
    scrape_url,
    scrape_all,
    filter_scraped_assets,
)

from .timeline import (
    ImageAsset,
    AudioAsset,
    TextToSpeechAsset,
    VoiceoverSettings,
    MusicSettings,
    MUSIC_PRESETS,
    build_render_payload,
    background_from_assets,
)

from .shotstack import (
    VALID_VOICES,
    validate_render_payload,
    submit_render,
    fetch_render_status,
    get_render_id,
)

from .poller import (
    RenderJob,
    RenderStatusPoller,
    wait_for_render,
)

__all__ = [
    # Errors
    'PromoForgeError',
    'ValidationError',
    'ScrapeFailedError',
    'UpstreamError',
    'NetworkError',
    'ConfigurationError',
    'RenderTimeoutError',
    # URLs and metadata
    'resolve_url',
    'is_absolute_url',
    'SINGLE_MODE',
    'BATCH_MODE',
    'extract_scraped_asset',
    'failed_scraped_asset',
    # Scraping
    'scrape_url',
    'scrape_all',
    'filter_scraped_assets',
    # Timeline
    'ImageAsset',
    'AudioAsset',
    'TextToSpeechAsset',
    'VoiceoverSettings',
    'MusicSettings',
    'MUSIC_PRESETS',
    'build_render_payload',
    'background_from_assets',
    # Rendering
    'VALID_VOICES',
    'validate_render_payload',
    'submit_render',
    'fetch_render_status',
    'get_render_id',
    'RenderJob',
    'RenderStatusPoller',
    'wait_for_render',
]
