"""
Response helpers shared by the PromoForge Cloud Functions.

Handlers return Flask-style (body, status, headers) tuples with a JSON body
and permissive CORS headers.
"""

import json
import traceback
from typing import Any, Dict, Optional, Tuple

from .errors import PromoForgeError, UpstreamError, ValidationError

CORS_HEADERS = {'Access-Control-Allow-Origin': '*'}


def preflight_response(methods: str = 'POST') -> Tuple[str, int, Dict[str, str]]:
    """Answer a CORS preflight request."""
    headers = {
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Methods': methods,
        'Access-Control-Allow-Headers': 'Content-Type',
        'Access-Control-Max-Age': '3600'
    }
    return ('', 204, headers)


def json_response(body: Dict[str, Any], status: int = 200) -> Tuple[str, int, Dict[str, str]]:
    headers = dict(CORS_HEADERS)
    headers['Content-Type'] = 'application/json'
    return (json.dumps(body), status, headers)


def error_response(error: Exception, flag: str, fallback: str) -> Tuple[str, int, Dict[str, str]]:
    """
    Turn an exception into an error response.

    Args:
        error: The exception raised by the handler
        flag: Success flag name of the endpoint ('success' or 'ok')
        fallback: Message used when an unexpected exception has none

    PromoForge errors keep their own status; anything else is a 500.
    """
    if isinstance(error, PromoForgeError):
        body = {flag: False, 'error': error.message}
        if isinstance(error, ValidationError) and error.details:
            body['details'] = error.details
        if isinstance(error, UpstreamError) and error.payload is not None:
            body['errorFromShotstack'] = error.payload
        return json_response(body, error.status_code)

    print(f"Error: {str(error)}\n{traceback.format_exc()}")
    return json_response({flag: False, 'error': str(error) or fallback}, 500)


def get_request_json(request) -> Optional[Any]:
    """Parsed JSON body, or None if it is missing or malformed."""
    return request.get_json(silent=True)
