from __future__ import annotations

import logging
import signal
import threading
import time

from lyricbar.config import AppConfig
from lyricbar.i18n import t
from lyricbar.mpris.client import MprisClient
from lyricbar.mpris.errors import NoPlayersFound, PlayerUnavailable
from lyricbar.player.track import Track
from lyricbar.render.ansi import AnsiRenderer
from lyricbar.sources.errors import DocumentTooLarge
from lyricbar.sources.service import LyricsService
from lyricbar.view import LyricsView

logger = logging.getLogger(__name__)


def resolve_in_background(svc: LyricsService, view: LyricsView, track: Track) -> None:
    """Worker-thread entry point; nothing raised here would ever be seen otherwise."""
    try:
        svc.update_lyrics(track, view.set_lyrics)
    except DocumentTooLarge as e:
        logger.error("Giving up on lyrics for %s: %s", track.display, e)
        view.set_lyrics(track, t("lyrics_not_found"))
    except Exception:
        logger.exception("Lyrics resolution failed for %s", track.display)
        view.set_lyrics(track, t("lyrics_not_found"))


def watch(cfg: AppConfig, *, preferred_player: str | None, debug: bool) -> int:
    """
    Main watch loop:
    MPRIS -> track change -> resolve lyrics in a worker -> render on change.
    """
    svc = LyricsService(cfg)
    try:
        svc.cache.ensure_path_exists()
    except OSError as e:
        logger.warning("Cannot create lyrics cache directory %s: %s", cfg.cache_dir, e)

    view = LyricsView(placeholder=t("loading"))
    renderer = AnsiRenderer(use_alt_screen=cfg.use_alt_screen)
    renderer.enter()

    # Handle SIGINT (Ctrl+C) gracefully
    def _on_sigint(signum, frame):
        renderer.exit()
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, _on_sigint)

    try:
        last_track_key: str | None = None
        last_version = -1
        placeholders = {t("loading"), t("lyrics_not_found")}
        tick_s = 1.0 / max(cfg.refresh_hz, 1.0)

        while True:
            try:
                client = MprisClient.pick_player(preferred=preferred_player)
            except NoPlayersFound:
                last_track_key = None
                view.set_track(None)
                renderer.render("lyricbar", [t("no_mpris_players")], placeholder=True)
                time.sleep(1.0)
                continue

            try:
                track = client.current_track()
            except PlayerUnavailable as e:
                renderer.render("lyricbar", [t("mpris_unavailable", error=str(e))], placeholder=True)
                time.sleep(0.5)
                continue

            # track changed?
            if track.track_key != last_track_key:
                last_track_key = track.track_key
                view.set_track(track)
                # One daemon thread per track change; stale lookups run out on their own.
                threading.Thread(
                    target=resolve_in_background,
                    args=(svc, view, track),
                    name="lyricbar-resolve",
                    daemon=True,
                ).start()

            version, current, text = view.snapshot()
            if version != last_version and current is not None:
                last_version = version
                renderer.render(current.display, text.splitlines(), placeholder=text in placeholders)

            time.sleep(tick_s)
    except KeyboardInterrupt:
        return 0
    finally:
        renderer.exit()
