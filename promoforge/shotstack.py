"""
Shotstack render API client for PromoForge.

Responsibilities:
- Validate audio and text-to-speech clips before anything leaves the server
- Submit render payloads
- Query render status by id

Does NOT:
- Retry failed calls
- Poll (see poller.py)
"""

import os
import re
from typing import Any, Dict, Optional

import requests

from .errors import ConfigurationError, NetworkError, UpstreamError, ValidationError
from .timeline import AudioAsset, TextToSpeechAsset, parse_asset
from .url_utils import is_absolute_url

# Shotstack render ids are UUIDs
RENDER_ID_PATTERN = re.compile(r'[A-Za-z0-9-]+')

# Shotstack TTS character limit
MAX_TTS_LENGTH = 3000

# Voices accepted by Shotstack's built-in text-to-speech
VALID_VOICES = [
    'Joanna', 'Kendra', 'Kimberly', 'Ivy', 'Salli',  # Female en-US
    'Matthew', 'Joey', 'Justin',  # Male en-US
    'Amy', 'Emma', 'Brian',  # en-GB
    'Nicole', 'Russell',  # en-AU
]


def get_shotstack_config() -> Dict[str, Any]:
    """
    Read Shotstack settings from the environment.

    Environment variables:
        SHOTSTACK_API_KEY: API key (required)
        SHOTSTACK_API_ENV: 'v1' (production, default) or 'stage'
        SHOTSTACK_HOST: Full base URL, overrides SHOTSTACK_API_ENV
        SHOTSTACK_TIMEOUT_SECONDS: Request timeout (default 30)
    """
    api_key = os.environ.get('SHOTSTACK_API_KEY')
    if not api_key:
        raise ConfigurationError('Server configuration error: Missing Shotstack API key')

    api_env = os.environ.get('SHOTSTACK_API_ENV', 'v1')
    host = os.environ.get('SHOTSTACK_HOST') or f'https://api.shotstack.io/{api_env}'

    return {
        'api_key': api_key,
        'render_url': f"{host.rstrip('/')}/render",
        'timeout': float(os.environ.get('SHOTSTACK_TIMEOUT_SECONDS', '30')),
    }


def should_check_audio_urls() -> bool:
    return os.environ.get('RENDER_CHECK_AUDIO_URLS', 'false').lower() == 'true'


def validate_tts_asset(asset: TextToSpeechAsset):
    if not asset.text or not asset.text.strip():
        raise ValidationError('TTS text cannot be empty')

    if len(asset.text) > MAX_TTS_LENGTH:
        raise ValidationError(
            f'TTS text exceeds {MAX_TTS_LENGTH} character limit (current: {len(asset.text)} characters)'
        )

    if asset.voice and asset.voice not in VALID_VOICES:
        raise ValidationError(f'Invalid voice "{asset.voice}". Valid voices: {", ".join(VALID_VOICES)}')


def validate_audio_asset(asset: AudioAsset, check_reachable: bool = False):
    if not asset.src or not asset.src.strip():
        raise ValidationError('Audio source URL cannot be empty')

    if not is_absolute_url(asset.src):
        raise ValidationError(f'Invalid audio URL: {asset.src}')

    if check_reachable:
        check_audio_url(asset.src)


def check_audio_url(src: str):
    """HEAD the audio source so an unreachable file fails here, not mid-render."""
    print(f"Testing audio URL accessibility: {src}")
    try:
        response = requests.head(src, timeout=10, allow_redirects=True)
    except requests.exceptions.RequestException as e:
        raise ValidationError(f'Cannot access audio URL: {src}', details=[str(e)])

    if not response.ok:
        raise ValidationError(f'Audio URL is not accessible ({response.status_code}): {src}')


def validate_render_payload(payload: Any, check_audio_urls: Optional[bool] = None) -> Dict[str, Any]:
    """
    Validate every clip of a render payload.

    Text-to-speech clips need non-empty text within the Shotstack limit and a
    known voice; audio clips need an absolute source URL. Returns the payload
    unchanged.

    Raises:
        ValidationError: on the first invalid clip
    """
    if check_audio_urls is None:
        check_audio_urls = should_check_audio_urls()

    if not isinstance(payload, dict):
        raise ValidationError('Render payload must be a JSON object')

    timeline = payload.get('timeline')
    tracks = timeline.get('tracks') if isinstance(timeline, dict) else None
    if not isinstance(tracks, list):
        raise ValidationError('Render payload requires timeline.tracks')

    for track in tracks:
        clips = track.get('clips') if isinstance(track, dict) else None
        if not isinstance(clips, list):
            raise ValidationError('Every track requires a clips array')

        for clip in clips:
            if not isinstance(clip, dict):
                raise ValidationError('Clip must be an object')
            asset = parse_asset(clip.get('asset'))

            if isinstance(asset, TextToSpeechAsset):
                validate_tts_asset(asset)
            elif isinstance(asset, AudioAsset):
                validate_audio_asset(asset, check_reachable=check_audio_urls)

    return payload


def extract_error_message(data: Any, fallback: str) -> str:
    """
    Pick the most specific error message from a Shotstack error body.

    Order: validation errors array in 'data', then 'error', then 'message'.
    """
    if not isinstance(data, dict):
        return fallback

    errors = data.get('data')
    if isinstance(errors, list) and errors:
        messages = [
            err.get('message') if isinstance(err, dict) else err
            for err in errors
        ]
        messages = [m for m in messages if isinstance(m, str) and m]
        if messages:
            return ', '.join(messages)

    error = data.get('error')
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict) and isinstance(error.get('message'), str) and error['message']:
        return error['message']

    message = data.get('message')
    if isinstance(message, str) and message:
        return message

    return fallback


def _parse_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _summarize_tracks(payload: Dict[str, Any]) -> Dict[str, Any]:
    tracks = payload['timeline']['tracks']
    return {
        'trackCount': len(tracks),
        'hasAudio': any(
            isinstance(clip.get('asset'), dict) and clip['asset'].get('type') in ('audio', 'text-to-speech')
            for track in tracks
            for clip in track.get('clips', [])
        ),
    }


def submit_render(payload: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Validate and submit a render payload.

    Returns:
        Shotstack response body, e.g. {"success": true, "response": {"id": "..."}}

    Raises:
        ConfigurationError: SHOTSTACK_API_KEY is not set
        ValidationError: a clip failed local validation (nothing was sent)
        UpstreamError: Shotstack rejected the payload
        NetworkError: Shotstack could not be reached
    """
    config = config or get_shotstack_config()
    validate_render_payload(payload)

    summary = _summarize_tracks(payload)
    print(f"Sending render request to Shotstack: {summary['trackCount']} tracks, audio={summary['hasAudio']}")

    try:
        response = requests.post(
            config['render_url'],
            headers={
                'x-api-key': config['api_key'],
                'Content-Type': 'application/json',
            },
            json=payload,
            timeout=config['timeout'],
        )
    except requests.exceptions.Timeout:
        raise NetworkError('Shotstack request timed out')
    except requests.exceptions.RequestException as e:
        raise NetworkError(f'Shotstack request failed: {str(e)}')

    data = _parse_json(response)

    if not response.ok:
        fallback = 'Shotstack API request failed' if data is not None else (response.reason or 'Shotstack API request failed')
        message = extract_error_message(data, fallback)
        print(f"Shotstack API error {response.status_code}: {message}")
        raise UpstreamError(message, status_code=response.status_code, payload=data)

    if not isinstance(data, dict):
        raise UpstreamError('Shotstack returned a malformed response', status_code=502)

    render_id = (data.get('response') or {}).get('id')
    print(f"Shotstack render started: {render_id}")
    return data


def get_render_id(data: Dict[str, Any]) -> Optional[str]:
    """Render id from a submit response, or None."""
    response = data.get('response') if isinstance(data, dict) else None
    if isinstance(response, dict):
        return response.get('id')
    return None


def fetch_render_status(render_id: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Query a render's status.

    Returns:
        Shotstack response body, e.g. {"response": {"status": "done", "url": "..."}}

    Raises:
        ConfigurationError, ValidationError, UpstreamError, NetworkError
    """
    config = config or get_shotstack_config()

    if not render_id or not str(render_id).strip():
        raise ValidationError('Render ID is required')

    if not RENDER_ID_PATTERN.fullmatch(str(render_id)):
        raise ValidationError('Invalid render ID')

    try:
        response = requests.get(
            f"{config['render_url']}/{render_id}",
            headers={
                'x-api-key': config['api_key'],
                'Content-Type': 'application/json',
            },
            timeout=config['timeout'],
        )
    except requests.exceptions.Timeout:
        raise NetworkError('Shotstack request timed out')
    except requests.exceptions.RequestException as e:
        raise NetworkError(f'Shotstack request failed: {str(e)}')

    data = _parse_json(response)

    if not response.ok:
        message = extract_error_message(data, 'Failed to check render status')
        print(f"Shotstack status check failed for {render_id}: {response.status_code} {message}")
        raise UpstreamError(message, status_code=response.status_code, payload=data)

    if not isinstance(data, dict):
        raise UpstreamError('Shotstack returned a malformed status response', status_code=502)

    status_body = data.get('response') or {}
    status = status_body.get('status') if isinstance(status_body, dict) else None
    if status == 'done':
        print(f"Render complete: {render_id} {status_body.get('url')}")
    elif status == 'failed':
        print(f"Render failed: {render_id} {status_body.get('error')}")
    else:
        print(f"Render in progress: {render_id} ({status})")

    return data
