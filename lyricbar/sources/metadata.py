from __future__ import annotations

from lyricbar.player.track import Track

from .base import FetchResult, LyricsSource

# Checked in this order; the first present field wins.
LYRICS_FIELDS = ("unsynced lyrics", "UNSYNCEDLYRICS", "lyrics")


class MetadataSource(LyricsSource):
    """Lyrics embedded in the track's own tags."""

    name = "metadata"

    def fetch(self, track: Track) -> FetchResult:
        with track.locked():
            for field in LYRICS_FIELDS:
                value = track.find_meta(field)
                if value is not None:
                    return self._hit(value)
        return self._miss()
