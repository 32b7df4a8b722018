from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Mapping

# Guards metadata of every track handed out by the player, like a playlist lock.
PLAYLIST_LOCK = threading.RLock()


@dataclass(frozen=True, slots=True)
class TrackKey:
    """The (artist, title) pair lyrics are looked up and cached by."""

    artist: str
    title: str

    @property
    def display(self) -> str:
        return f"{self.artist} - {self.title}"


@dataclass(eq=False)
class Track:
    """
    A playlist item as seen by the lyrics pipeline.

    `meta` must only be read while holding `lock` (see `locked()`), since the
    player thread may replace it when tags are refreshed.
    """

    meta: Mapping[str, str]
    track_key: str = ""
    lock: threading.RLock = field(default=PLAYLIST_LOCK, repr=False)

    @contextmanager
    def locked(self) -> Iterator["Track"]:
        with self.lock:
            yield self

    def find_meta(self, key: str) -> str | None:
        return self.meta.get(key)

    def identity(self) -> TrackKey | None:
        with self.locked():
            artist = self.find_meta("artist")
            title = self.find_meta("title")
        if artist is None or title is None:
            return None
        return TrackKey(artist=artist, title=title)

    @property
    def display(self) -> str:
        with self.locked():
            artist = self.find_meta("artist") or ""
            title = self.find_meta("title") or ""
        if artist and title:
            return f"{artist} - {title}"
        return title or artist or "Unknown track"
