"""
Voice Generator Cloud Function

Voice previews for the voiceover picker.

Entry point generate_audio (/generate-audio):
- GET: voice catalog
- POST: synthesize speech with ElevenLabs, upload the MP3, return its URL

Does NOT:
- Add the audio to a render (renders use Shotstack's own text-to-speech)
- Retry failed synthesis or uploads
"""

import os
import sys

import functions_framework

# Add shared package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from promoforge.errors import ValidationError
from promoforge.http_utils import error_response, get_request_json, json_response, preflight_response
from promoforge.speech import SpeechSynthesizer, find_voice, get_available_voices, parse_audio_request, validate_text_length
from promoforge.storage import AudioStorage, generate_unique_filename

# Lazily configured service handles; replaced in tests
synthesizer = SpeechSynthesizer()
audio_storage = AudioStorage()


def list_voices():
    return json_response({'ok': True, 'voices': get_available_voices()})


def create_audio(request):
    options = parse_audio_request(get_request_json(request))

    validate_text_length(options.text)

    voice = find_voice(options.voice_id)
    if not voice:
        raise ValidationError(f'Invalid voice ID: {options.voice_id}')

    print(f"Audio generation request: voice={voice['name']}, chars={len(options.text)}, model={options.model_id}")

    # Step 1: Generate audio with ElevenLabs
    audio = synthesizer.synthesize(options.text, options.voice_id, options)

    # Step 2: Upload to Cloud Storage
    filename = generate_unique_filename('voiceover')
    audio_url = audio_storage.upload_audio(audio, filename)

    print(f"Audio generation complete: {audio_url} ({len(audio) / 1024:.2f} KB)")

    return json_response({
        'ok': True,
        'audioUrl': audio_url,
        'metadata': {
            'voice': voice['name'],
            'textLength': len(options.text),
            'sizeBytes': len(audio),
            'modelId': options.model_id,
        },
    })


@functions_framework.http
def generate_audio(request):
    """
    Main Cloud Function entry point.

    Expected JSON input (POST):
    {
        "text": "Meet Acme, the fastest way to ship.",
        "voiceId": "21m00Tcm4TlvDq8ikWAM",
        "modelId": "eleven_turbo_v2_5",
        "stability": 0.5,
        "similarityBoost": 0.75,
        "style": 0,
        "useSpeakerBoost": true,
        "optimizeStreamingLatency": 0
    }
    """
    if request.method == 'OPTIONS':
        return preflight_response('GET, POST')

    try:
        if request.method == 'GET':
            return list_voices()
        return create_audio(request)

    except Exception as e:
        print(f"Audio generation error: {e}")
        return error_response(e, 'ok', 'Internal server error')
