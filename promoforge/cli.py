"""
CLI entrypoint. Turns one or more URLs into a promo video:

  promoforge https://acme.test
  promoforge https://acme.test https://acme.test/pricing --music calm-1
  promoforge https://acme.test --voiceover "Meet Acme." --voice Matthew --dry-run

One URL is scraped in single mode (up to 10 screenshots); several URLs are
scraped concurrently in batch mode (up to 5 each).
"""

import argparse
import json
import sys

from dotenv import load_dotenv

from .errors import PromoForgeError
from .metadata_utils import SINGLE_MODE
from .poller import MAX_POLL_ATTEMPTS, POLL_INTERVAL_SECONDS, RenderStatusPoller
from .scraper import filter_scraped_assets, scrape_all, scrape_url
from .shotstack import VALID_VOICES, get_render_id, get_shotstack_config, submit_render
from .timeline import (
    CUSTOM_MUSIC,
    DEFAULT_VOICE,
    MAX_IMAGES,
    MUSIC_PRESETS,
    MusicSettings,
    VoiceoverSettings,
    background_from_assets,
    build_render_payload,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='promoforge',
        description="Generate a promo video from a website's metadata and screenshots",
    )
    parser.add_argument('urls', nargs='+', metavar='URL', help='Page(s) to scrape (max 10)')
    parser.add_argument('--voiceover', type=str, help='Voiceover script (Shotstack text-to-speech)')
    parser.add_argument('--voice', choices=VALID_VOICES, default=DEFAULT_VOICE, help='Voiceover voice')
    parser.add_argument('--voiceover-volume', type=int, default=80, help='Voiceover volume percent')
    parser.add_argument(
        '--music',
        choices=sorted(MUSIC_PRESETS) + [CUSTOM_MUSIC],
        help="Background music preset, or 'custom' with --music-url",
    )
    parser.add_argument('--music-url', type=str, help='Custom background music URL')
    parser.add_argument('--music-volume', type=int, default=30, help='Music volume percent')
    parser.add_argument('--interval', type=float, default=POLL_INTERVAL_SECONDS, help='Seconds between status checks')
    parser.add_argument('--max-attempts', type=int, default=MAX_POLL_ATTEMPTS, help='Status checks before giving up')
    parser.add_argument('--dry-run', action='store_true', help='Print the render payload instead of submitting it')
    return parser


def collect_assets(urls):
    """Scrape in single mode for one URL, batch mode for several."""
    if len(urls) == 1:
        return [scrape_url(urls[0], SINGLE_MODE)]
    return filter_scraped_assets(scrape_all(urls))


def run(args) -> int:
    assets = collect_assets(args.urls)

    screenshots = [shot for asset in assets for shot in asset['screenshots']][:MAX_IMAGES]
    print(f"Using {len(screenshots)} screenshots from {len(assets)} page(s)")

    payload = build_render_payload(
        screenshots,
        voiceover=VoiceoverSettings(
            enabled=bool(args.voiceover),
            script=args.voiceover or '',
            voice=args.voice,
            volume_percent=args.voiceover_volume,
        ),
        music=MusicSettings(
            enabled=bool(args.music),
            selection=args.music or '',
            volume_percent=args.music_volume,
            custom_url=args.music_url,
        ),
        background=background_from_assets(assets),
    )

    if args.dry_run:
        print(json.dumps(payload, indent=2))
        return 0

    data = submit_render(payload, config=get_shotstack_config())
    render_id = get_render_id(data)
    if not render_id:
        print(f"Shotstack did not return a render id: {json.dumps(data)}", file=sys.stderr)
        return 1

    poller = RenderStatusPoller(render_id, interval=args.interval, max_attempts=args.max_attempts)
    try:
        job = poller.run()
    except KeyboardInterrupt:
        poller.cancel()
        print(f"Stopped polling. Render {render_id} may still finish on Shotstack.", file=sys.stderr)
        return 1

    job.raise_for_status()
    if not job.result_url:
        print(f"Render {render_id} did not finish (status: {job.status})", file=sys.stderr)
        return 1

    print(f"Video ready: {job.result_url}")
    return 0


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except PromoForgeError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
