"""
Shotstack timeline building for PromoForge.

A render payload is one visual track of screenshots (3 seconds each), plus
an optional voiceover track and an optional music track that both span the
whole video:

    {
        "timeline": {"background": "#RRGGBB", "tracks": [{"clips": [...]}, ...]},
        "output": {"format": "mp4", "resolution": "hd"}
    }

Clip assets are a closed set of three types (image, audio, text-to-speech).
Each one is a small dataclass so the builder and the validator can handle
every case explicitly.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .errors import ValidationError
from .metadata_utils import DEFAULT_THEME_COLOR

IMAGE_DURATION_SECONDS = 3
MAX_IMAGES = 10

OUTPUT_FORMAT = 'mp4'
OUTPUT_RESOLUTION = 'hd'

DEFAULT_VOICE = 'Joanna'
DEFAULT_VOICE_LANGUAGE = 'en-US'

CUSTOM_MUSIC = 'custom'
MUSIC_PRESETS = {
    'upbeat-1': 'https://cdn.pixabay.com/audio/2022/05/27/audio_1808fbf07a.mp3',
    'calm-1': 'https://cdn.pixabay.com/audio/2022/03/10/audio_5c2e788c03.mp3',
    'energetic-1': 'https://cdn.pixabay.com/audio/2022/08/02/audio_2dde668d05.mp3',
}

IMAGE = 'image'
AUDIO = 'audio'
TEXT_TO_SPEECH = 'text-to-speech'


@dataclass(frozen=True)
class ImageAsset:
    src: str

    def to_dict(self) -> Dict[str, Any]:
        return {'type': IMAGE, 'src': self.src}


@dataclass(frozen=True)
class AudioAsset:
    src: str
    volume: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        asset = {'type': AUDIO, 'src': self.src}
        if self.volume is not None:
            asset['volume'] = self.volume
        return asset


@dataclass(frozen=True)
class TextToSpeechAsset:
    text: str
    voice: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        asset = {'type': TEXT_TO_SPEECH, 'text': self.text}
        if self.voice is not None:
            asset['voice'] = self.voice
        if self.language is not None:
            asset['language'] = self.language
        return asset


Asset = Union[ImageAsset, AudioAsset, TextToSpeechAsset]


def parse_asset(data: Any) -> Union[Asset, Dict[str, Any]]:
    """
    Turn a wire-format asset dict into its dataclass.

    Assets of other Shotstack types (html, title, video...) are returned
    as-is; they are forwarded to the renderer without local checks.
    """
    if not isinstance(data, dict):
        raise ValidationError('Clip asset must be an object')

    asset_type = data.get('type')
    if asset_type == IMAGE:
        return ImageAsset(src=data.get('src') or '')
    if asset_type == AUDIO:
        return AudioAsset(src=data.get('src') or '', volume=data.get('volume'))
    if asset_type == TEXT_TO_SPEECH:
        return TextToSpeechAsset(
            text=data.get('text') or '',
            voice=data.get('voice'),
            language=data.get('language'),
        )
    return data


@dataclass
class VoiceoverSettings:
    enabled: bool = False
    script: str = ''
    voice: str = DEFAULT_VOICE
    volume_percent: int = 80


@dataclass
class MusicSettings:
    enabled: bool = False
    selection: str = 'upbeat-1'
    volume_percent: int = 30
    custom_url: Optional[str] = None


def resolve_music_url(music: MusicSettings) -> Optional[str]:
    """Preset name or custom URL to a playable source, or None."""
    if music.selection == CUSTOM_MUSIC:
        return music.custom_url or None
    return MUSIC_PRESETS.get(music.selection)


def make_clip(asset: Asset, start: float, length: Union[float, str], **overrides) -> Dict[str, Any]:
    """Serialize one clip. Overrides (fit, effect, volume) are added when not None."""
    clip = {'asset': asset.to_dict(), 'start': start, 'length': length}
    for key, value in overrides.items():
        if value is not None:
            clip[key] = value
    return clip


def build_visual_track(images: List[str]) -> Dict[str, Any]:
    clips = [
        make_clip(
            ImageAsset(src=image),
            start=index * IMAGE_DURATION_SECONDS,
            length=IMAGE_DURATION_SECONDS,
            fit='cover',
            effect='zoomIn',
        )
        for index, image in enumerate(images)
    ]
    return {'clips': clips}


def build_voiceover_track(voiceover: VoiceoverSettings, duration: float) -> Optional[Dict[str, Any]]:
    if not voiceover.enabled or not voiceover.script.strip():
        return None

    asset = TextToSpeechAsset(
        text=voiceover.script,
        voice=voiceover.voice,
        language=DEFAULT_VOICE_LANGUAGE,
    )
    return {'clips': [make_clip(asset, 0, duration, volume=voiceover.volume_percent / 100)]}


def build_music_track(music: MusicSettings, duration: float) -> Optional[Dict[str, Any]]:
    if not music.enabled or not music.selection:
        return None

    music_url = resolve_music_url(music)
    if not music_url:
        print(f"No valid music URL found for selection '{music.selection}', skipping music track")
        return None

    return {'clips': [make_clip(AudioAsset(src=music_url), 0, duration, volume=music.volume_percent / 100)]}


def background_from_assets(assets: List[Dict[str, Any]]) -> str:
    """Theme color of the first scraped asset, black if there is none."""
    if assets and assets[0].get('themeColor'):
        return assets[0]['themeColor']
    return DEFAULT_THEME_COLOR


def build_render_payload(
    images: List[str],
    voiceover: Optional[VoiceoverSettings] = None,
    music: Optional[MusicSettings] = None,
    background: str = DEFAULT_THEME_COLOR,
) -> Dict[str, Any]:
    """
    Build a Shotstack render payload.

    Args:
        images: Screenshot URLs in playback order (first 10 are used)
        voiceover: Optional voiceover settings
        music: Optional background music settings
        background: Timeline background color

    Returns:
        Render payload dict ready for submit_render()
    """
    images = [image for image in (images or []) if image][:MAX_IMAGES]
    if not images:
        raise ValidationError('No screenshots available. Please scrape a URL first.')

    duration = len(images) * IMAGE_DURATION_SECONDS
    tracks = [build_visual_track(images)]

    voiceover_track = build_voiceover_track(voiceover or VoiceoverSettings(), duration)
    if voiceover_track:
        tracks.append(voiceover_track)

    music_track = build_music_track(music or MusicSettings(), duration)
    if music_track:
        tracks.append(music_track)

    print(f"Built timeline: {len(images)} images, {duration}s, {len(tracks)} tracks")

    return {
        'timeline': {
            'background': background or DEFAULT_THEME_COLOR,
            'tracks': tracks,
        },
        'output': {
            'format': OUTPUT_FORMAT,
            'resolution': OUTPUT_RESOLUTION,
        },
    }
