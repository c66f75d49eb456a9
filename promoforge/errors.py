"""
Error types for PromoForge.

Every error carries the HTTP status it maps to, so the Cloud Functions can
turn any of them into a response without a lookup table:

- ValidationError (400): bad caller input, never retried
- UpstreamError (remote status): Shotstack / ElevenLabs / storage rejected the call
- NetworkError (400): a remote host or user-supplied URL could not be reached
- ConfigurationError (500): a required credential is missing
- RenderTimeoutError (504): the render did not finish within the polling ceiling
"""

from typing import Any, List, Optional


class PromoForgeError(Exception):
    """Base class for all PromoForge errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self):
        return self.message


class ValidationError(PromoForgeError):
    """Malformed or out-of-range caller input."""

    status_code = 400

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.details = details


class ScrapeFailedError(ValidationError):
    """No URL in a batch produced any screenshots."""


class UpstreamError(PromoForgeError):
    """A remote service rejected or errored on a request."""

    status_code = 502

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message, status_code)
        self.payload = payload


class NetworkError(PromoForgeError):
    """Connection failure reaching a remote service."""

    status_code = 400


class ConfigurationError(PromoForgeError):
    """A required credential or setting is missing."""

    status_code = 500


class RenderTimeoutError(PromoForgeError):
    """Render status polling hit its attempt ceiling."""

    status_code = 504
