"""
ElevenLabs speech synthesis for PromoForge voice previews.

The synthesizer holds a lazily built ElevenLabs client. Without
ELEVENLABS_API_KEY it stays unconfigured and every call raises
ConfigurationError before touching the network.
"""

import os
from typing import Any, Callable, Dict, List, Optional

from elevenlabs import VoiceSettings
from elevenlabs.client import ElevenLabs
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError, UpstreamError, ValidationError

# ElevenLabs character limit per request
MAX_TEXT_LENGTH = 5000

DEFAULT_MODEL_ID = 'eleven_turbo_v2_5'

# Pre-made voices (free tier)
ELEVENLABS_VOICES = {
    'rachel': {
        'id': '21m00Tcm4TlvDq8ikWAM',
        'name': 'Rachel',
        'gender': 'female',
        'accent': 'American',
        'description': 'Calm, clear, and professional',
    },
    'domi': {
        'id': 'AZnzlk1XvdvUeBnXmlld',
        'name': 'Domi',
        'gender': 'female',
        'accent': 'American',
        'description': 'Strong, confident, and authoritative',
    },
    'bella': {
        'id': 'EXAVITQu4vr4xnSDxMaL',
        'name': 'Bella',
        'gender': 'female',
        'accent': 'American',
        'description': 'Soft, gentle, and soothing',
    },
    'antoni': {
        'id': 'ErXwobaYiN019PkySvjV',
        'name': 'Antoni',
        'gender': 'male',
        'accent': 'American',
        'description': 'Well-rounded, warm, and friendly',
    },
    'elli': {
        'id': 'MF3mGyEYCl7XYWbV9V6O',
        'name': 'Elli',
        'gender': 'female',
        'accent': 'American',
        'description': 'Energetic, young, and expressive',
    },
    'josh': {
        'id': 'TxGEqnHWrfWFTfGW9XjX',
        'name': 'Josh',
        'gender': 'male',
        'accent': 'American',
        'description': 'Deep, authoritative, and confident',
    },
    'arnold': {
        'id': 'VR6AewLTigWG4xSOukaG',
        'name': 'Arnold',
        'gender': 'male',
        'accent': 'American',
        'description': 'Crisp, clear, and professional',
    },
    'adam': {
        'id': 'pNInz6obpgDQGcFmaJgB',
        'name': 'Adam',
        'gender': 'male',
        'accent': 'American',
        'description': 'Deep, resonant, and engaging',
    },
    'sam': {
        'id': 'yoZ06aMxZJJ28mfd3POQ',
        'name': 'Sam',
        'gender': 'male',
        'accent': 'American',
        'description': 'Dynamic, raspy, and expressive',
    },
}


class AudioGenerationRequest(BaseModel):
    """Body of a POST /generate-audio request (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    text: str = Field(min_length=1)
    voice_id: str = Field(alias='voiceId', min_length=1)
    model_id: str = Field(DEFAULT_MODEL_ID, alias='modelId')
    stability: float = Field(0.5, ge=0, le=1)
    similarity_boost: float = Field(0.75, alias='similarityBoost', ge=0, le=1)
    style: float = Field(0, ge=0, le=1)
    use_speaker_boost: bool = Field(True, alias='useSpeakerBoost')
    optimize_streaming_latency: int = Field(0, alias='optimizeStreamingLatency', ge=0, le=4)


def parse_audio_request(body: Any) -> AudioGenerationRequest:
    """
    Validate a generate-audio request body.

    Raises:
        ValidationError: with the schema errors as details
    """
    try:
        return AudioGenerationRequest.model_validate(body if body is not None else {})
    except PydanticValidationError as e:
        details = e.errors(include_url=False, include_context=False, include_input=False)
        raise ValidationError('Validation failed', details=details)


def get_available_voices() -> List[Dict[str, str]]:
    """Voice catalog in the shape the UI expects."""
    return [
        {
            'id': voice['id'],
            'key': key,
            'name': voice['name'],
            'gender': voice['gender'],
            'accent': voice['accent'],
            'description': voice['description'],
        }
        for key, voice in ELEVENLABS_VOICES.items()
    ]


def find_voice(voice_id: str) -> Optional[Dict[str, str]]:
    """Look up a voice by its ElevenLabs id."""
    for voice in ELEVENLABS_VOICES.values():
        if voice['id'] == voice_id:
            return voice
    return None


def validate_text_length(text: str, max_length: int = MAX_TEXT_LENGTH) -> bool:
    """Raise ValidationError for empty or over-length text."""
    if not text or not text.strip():
        raise ValidationError('TTS text cannot be empty')

    if len(text) > max_length:
        raise ValidationError(
            f'Text exceeds {max_length} character limit (current: {len(text)} characters)'
        )

    return True


def _default_client_factory(api_key: str):
    return ElevenLabs(api_key=api_key)


class SpeechSynthesizer:
    """Text-to-speech through ElevenLabs, returning complete MP3 bytes."""

    def __init__(self, api_key: Optional[str] = None, client_factory: Optional[Callable[[str], Any]] = None):
        self.api_key = api_key if api_key is not None else os.environ.get('ELEVENLABS_API_KEY')
        self._client_factory = client_factory or _default_client_factory
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_client(self):
        if not self.is_configured:
            raise ConfigurationError('ElevenLabs API key not configured')
        if self._client is None:
            self._client = self._client_factory(self.api_key)
        return self._client

    def synthesize(self, text: str, voice_id: str, options: Optional[AudioGenerationRequest] = None) -> bytes:
        """
        Generate speech audio.

        Args:
            text: Script to speak (max 5000 characters)
            voice_id: ElevenLabs voice id from ELEVENLABS_VOICES
            options: Model and voice settings (defaults if omitted)

        Returns:
            MP3 bytes

        Raises:
            ValidationError: bad text or unknown voice (nothing sent)
            ConfigurationError: no API key
            UpstreamError: ElevenLabs failed, including mid-stream
        """
        validate_text_length(text)
        if not find_voice(voice_id):
            raise ValidationError(f'Invalid voice ID: {voice_id}')

        client = self.get_client()
        options = options or AudioGenerationRequest(text=text, voiceId=voice_id)

        print(f"Generating speech with ElevenLabs: voice={voice_id}, chars={len(text)}, model={options.model_id}")

        try:
            audio_stream = client.text_to_speech.convert(
                voice_id=voice_id,
                text=text,
                model_id=options.model_id,
                voice_settings=VoiceSettings(
                    stability=options.stability,
                    similarity_boost=options.similarity_boost,
                    style=options.style,
                    use_speaker_boost=options.use_speaker_boost,
                ),
                optimize_streaming_latency=options.optimize_streaming_latency,
            )

            chunks = []
            for chunk in audio_stream:
                if chunk:
                    chunks.append(bytes(chunk))
            audio = b''.join(chunks)
        except Exception as e:
            print(f"ElevenLabs TTS error: {e}")
            raise UpstreamError(
                f'Failed to generate speech: {str(e) or "Unknown error"}',
                status_code=getattr(e, 'status_code', None) or 502,
            )

        if not audio:
            raise UpstreamError('Failed to generate speech: empty audio stream')

        print(f"Speech generated: {len(audio) / 1024:.2f} KB")
        return audio
