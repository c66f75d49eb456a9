"""
Cloud Storage uploads for generated audio.

Audio lands in AUDIO_BUCKET under audio/ and is served from its public
storage.googleapis.com URL (the bucket is public via IAM).
"""

import json
import os
import random
import string
import time
from typing import Any, Callable, Optional

from google.cloud import storage
from google.oauth2 import service_account

from .errors import ConfigurationError, UpstreamError

SCOPES = ['https://www.googleapis.com/auth/cloud-platform']


def get_storage_client():
    """Initialize Cloud Storage client."""
    creds_json = os.environ.get('GOOGLE_SERVICE_ACCOUNT')
    if creds_json:
        creds_dict = json.loads(creds_json)
        creds = service_account.Credentials.from_service_account_info(
            creds_dict,
            scopes=SCOPES
        )
        return storage.Client(credentials=creds, project=creds_dict.get('project_id'))
    else:
        # Use default credentials in Cloud Functions
        return storage.Client()


def generate_unique_filename(prefix: str = 'audio') -> str:
    """prefix-<epoch ms>-<6 random base36 chars>, e.g. voiceover-1718000000000-k3x9qa"""
    timestamp = int(time.time() * 1000)
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{prefix}-{timestamp}-{suffix}"


class AudioStorage:
    """Uploads audio bytes and hands back a public URL."""

    def __init__(self, bucket_name: Optional[str] = None, client_factory: Optional[Callable[[], Any]] = None):
        self.bucket_name = bucket_name if bucket_name is not None else os.environ.get('AUDIO_BUCKET')
        self._client_factory = client_factory or get_storage_client
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.bucket_name)

    def get_client(self):
        if not self.is_configured:
            raise ConfigurationError('Storage not configured: AUDIO_BUCKET is not set')
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def public_url(self, blob_name: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket_name}/{blob_name}"

    def upload_audio(self, audio: bytes, filename: str = 'voiceover') -> str:
        """
        Upload MP3 bytes and return their public URL.

        Raises:
            ConfigurationError: no bucket configured
            UpstreamError: the upload failed (not retried)
        """
        client = self.get_client()
        blob_name = f"audio/{filename}.mp3"

        print(f"Uploading audio to Cloud Storage: {blob_name} ({len(audio) / 1024:.2f} KB)")

        try:
            bucket = client.bucket(self.bucket_name)
            blob = bucket.blob(blob_name)
            blob.upload_from_string(audio, content_type='audio/mpeg')
        except Exception as e:
            print(f"Storage upload error: {e}")
            raise UpstreamError(f'Failed to upload audio: {str(e) or "Unknown error"}')

        public_url = self.public_url(blob_name)
        print(f"Audio uploaded successfully: {public_url}")
        return public_url
