"""
Render status polling for PromoForge.

A RenderStatusPoller checks one render every `interval` seconds until
Shotstack reports done/failed or `max_attempts` polls have been made.
The wait between polls is a threading.Event, so cancel() from any thread
ends the loop immediately. Once a job is terminal no further requests are
made.

States: queued -> rendering -> done | failed, plus timed_out when the
attempt ceiling is reached first.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .errors import PromoForgeError, RenderTimeoutError, UpstreamError
from .shotstack import fetch_render_status

POLL_INTERVAL_SECONDS = 5
MAX_POLL_ATTEMPTS = 60  # 5 minutes at the default interval

QUEUED = 'queued'
RENDERING = 'rendering'
DONE = 'done'
FAILED = 'failed'
UNKNOWN = 'unknown'
TIMED_OUT = 'timed_out'

TERMINAL_STATUSES = (DONE, FAILED, TIMED_OUT)

TIMEOUT_MESSAGE = 'Video generation is taking longer than expected. Please check back later.'


@dataclass
class RenderJob:
    id: str
    status: str = QUEUED
    result_url: Optional[str] = None
    error: Optional[str] = None
    attempts: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def raise_for_status(self):
        """Raise if the job ended in failed or timed_out."""
        if self.status == FAILED:
            raise UpstreamError(f'Video generation failed: {self.error}')
        if self.status == TIMED_OUT:
            raise RenderTimeoutError(self.error or TIMEOUT_MESSAGE)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'status': self.status,
            'resultUrl': self.result_url,
            'error': self.error,
            'attempts': self.attempts,
        }


def normalize_status(remote_status: Optional[str]) -> str:
    """Map a Shotstack status onto the job states.

    Shotstack also reports fetching/preprocessing/saving, which are all
    still in progress.
    """
    if not remote_status:
        return UNKNOWN
    if remote_status in (QUEUED, RENDERING, DONE, FAILED):
        return remote_status
    return RENDERING


class RenderStatusPoller:
    """Polls one render until it finishes, fails, times out or is cancelled."""

    def __init__(
        self,
        render_id: str,
        fetch_status: Optional[Callable[[str], Dict[str, Any]]] = None,
        interval: float = POLL_INTERVAL_SECONDS,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        on_update: Optional[Callable[[RenderJob], None]] = None,
    ):
        self.job = RenderJob(id=render_id)
        self.fetch_status = fetch_status or fetch_render_status
        self.interval = interval
        self.max_attempts = max_attempts
        self.on_update = on_update
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self):
        """Stop polling. Safe to call from any thread, at any time."""
        self._cancelled.set()

    def poll_once(self) -> RenderJob:
        """Make one status request and apply it to the job."""
        job = self.job
        if job.is_terminal:
            return job
        job.attempts += 1

        try:
            data = self.fetch_status(job.id)
        except PromoForgeError as e:
            return self._finish(FAILED, error=e.message)
        except Exception as e:
            return self._finish(FAILED, error=str(e) or 'Unknown error')

        body = data.get('response') if isinstance(data, dict) else None
        if not isinstance(body, dict):
            return self._finish(FAILED, error='Malformed status response')

        status = normalize_status(body.get('status'))
        if status == DONE and body.get('url'):
            return self._finish(DONE, result_url=body['url'])
        if status == FAILED:
            return self._finish(FAILED, error=body.get('error') or 'Render failed')

        # done without a url yet counts as still rendering
        job.status = RENDERING if status == DONE else status

        if job.attempts >= self.max_attempts:
            return self._finish(TIMED_OUT, error=TIMEOUT_MESSAGE)

        self._notify()
        return job

    def run(self) -> RenderJob:
        """
        Poll until the job is terminal or the poller is cancelled.

        Waits `interval` seconds before every request. Returns the job; a
        cancelled job keeps the last observed non-terminal status.
        """
        while not self.job.is_terminal:
            if self._cancelled.wait(self.interval):
                print(f"Polling cancelled for render {self.job.id}")
                break
            self.poll_once()
        return self.job

    def start(self) -> threading.Thread:
        """Run the poller on a daemon thread. Use cancel() to stop it."""
        thread = threading.Thread(target=self.run, name=f'render-poller-{self.job.id}', daemon=True)
        thread.start()
        return thread

    def _finish(self, status: str, result_url: Optional[str] = None, error: Optional[str] = None) -> RenderJob:
        self.job.status = status
        self.job.result_url = result_url
        self.job.error = error

        if status == DONE:
            print(f"Render {self.job.id} done after {self.job.attempts} polls: {result_url}")
        else:
            print(f"Render {self.job.id} {status} after {self.job.attempts} polls: {error}")

        self._notify()
        return self.job

    def _notify(self):
        if self.on_update:
            self.on_update(self.job)


def wait_for_render(render_id: str, **kwargs) -> RenderJob:
    """Poll a render to completion with the default interval and ceiling."""
    return RenderStatusPoller(render_id, **kwargs).run()
