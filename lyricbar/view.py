from __future__ import annotations

import logging
import threading

from lyricbar.player.track import Track

logger = logging.getLogger(__name__)


class LyricsView:
    """
    What the screen should show: the playing track and its lyrics text.

    Resolutions run in a worker thread and may finish after the track has
    changed; `set_lyrics` drops those late results.
    """

    def __init__(self, placeholder: str = "") -> None:
        self._lock = threading.Lock()
        self._placeholder = placeholder
        self._track: Track | None = None
        self._text = placeholder
        self._version = 0

    def set_track(self, track: Track | None) -> None:
        with self._lock:
            self._track = track
            self._text = self._placeholder
            self._version += 1

    def is_playing(self, track: Track) -> bool:
        with self._lock:
            return self._track is not None and self._track.track_key == track.track_key

    def set_lyrics(self, track: Track, text: str) -> None:
        with self._lock:
            if self._track is None or self._track.track_key != track.track_key:
                logger.debug("Dropping lyrics for %s, no longer playing", track.track_key)
                return
            self._text = text
            self._version += 1

    def snapshot(self) -> tuple[int, Track | None, str]:
        with self._lock:
            return self._version, self._track, self._text
