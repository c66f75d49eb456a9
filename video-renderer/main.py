"""
Video Renderer Cloud Functions

Proxy between the browser and the Shotstack render API, so the API key
never leaves the server.

Entry points:
- render: validate and submit a timeline payload (POST /render)
- render_status: check a render by id (GET /render/status/{id})

Does NOT:
- Build timelines (promoforge.timeline, called by the client)
- Poll (the client polls render_status)
- Retry rejected renders
"""

import os
import sys

import functions_framework

# Add shared package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from promoforge.errors import ValidationError
from promoforge.http_utils import error_response, get_request_json, json_response, preflight_response
from promoforge.shotstack import fetch_render_status, get_shotstack_config, submit_render


@functions_framework.http
def render(request):
    """
    Submit a render.

    Expected JSON input:
    {
        "timeline": {"background": "#000000", "tracks": [{"clips": [...]}]},
        "output": {"format": "mp4", "resolution": "hd"}
    }
    """
    if request.method == 'OPTIONS':
        return preflight_response('POST')

    try:
        config = get_shotstack_config()

        payload = get_request_json(request)
        if payload is None:
            raise ValidationError('Request body must be a JSON render payload')

        data = submit_render(payload, config=config)

        return json_response({'ok': True, 'shotstack': data})

    except Exception as e:
        print(f"Render API error: {e}")
        return error_response(e, 'ok', 'Internal server error')


def get_render_id_from_request(request) -> str:
    """Render id from the last path segment (/render/status/<id>) or ?id=."""
    render_id = request.args.get('id') if getattr(request, 'args', None) else None
    if render_id:
        return render_id.strip()

    path = (getattr(request, 'path', '') or '').rstrip('/')
    segment = path.rsplit('/', 1)[-1] if path else ''
    if segment and segment not in ('status', 'render', 'render_status'):
        return segment
    return ''


@functions_framework.http
def render_status(request):
    """Check the status of a render: GET /render/status/<id>"""
    if request.method == 'OPTIONS':
        return preflight_response('GET')

    try:
        config = get_shotstack_config()

        render_id = get_render_id_from_request(request)
        if not render_id:
            raise ValidationError('Render ID is required')

        data = fetch_render_status(render_id, config=config)

        return json_response({'ok': True, 'shotstack': data})

    except Exception as e:
        print(f"Status API error: {e}")
        return error_response(e, 'ok', 'Internal server error')
