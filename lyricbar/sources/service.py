from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from lyricbar.cache.files import LyricsCache
from lyricbar.config import AppConfig
from lyricbar.i18n import t
from lyricbar.player.track import Track

from .azlyrics import AzLyricsSource
from .base import LyricsSource
from .metadata import MetadataSource
from .script import ScriptSource

logger = logging.getLogger(__name__)

Publisher = Callable[[Track, str], None]


class Stage(enum.Enum):
    CHECKING_METADATA = "checking metadata"
    CHECKING_CACHE = "checking cache"
    TRYING_SOURCES = "trying sources"
    CACHING = "caching"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class LyricsResponse:
    text: str | None
    source: str | None
    has_lyrics: bool


_NOT_FOUND = LyricsResponse(text=None, source=None, has_lyrics=False)


def _discard(track: Track, text: str) -> None:
    pass


class LyricsService:
    """
    Resolves lyrics for a track: tags, then the file cache, then the
    provider chain (script, azlyrics). Only provider results are cached.
    """

    def __init__(
        self,
        cfg: AppConfig,
        *,
        cache: LyricsCache | None = None,
        sources: list[LyricsSource] | None = None,
    ):
        self.cfg = cfg
        self.cache = cache if cache is not None else LyricsCache(cfg.cache_dir)
        self.metadata = MetadataSource()
        self.sources = sources if sources is not None else self._build_sources(cfg)

    @staticmethod
    def _build_sources(cfg: AppConfig) -> list[LyricsSource]:
        return [
            ScriptSource(command_template=cfg.custom_command, timeout_s=cfg.script_timeout_s),
            AzLyricsSource(timeout_s=cfg.fetch_timeout_s),
        ]

    def _stage(self, track: Track, stage: Stage) -> None:
        logger.debug("%s: %s", track.display, stage.value)

    def update_lyrics(self, track: Track, publish: Publisher = _discard) -> LyricsResponse:
        """
        Run the whole pipeline for `track`, publishing every visible state.

        DocumentTooLarge from the scraper is the only exception let through.
        """
        self._stage(track, Stage.CHECKING_METADATA)
        res = self.metadata.fetch(track)
        if res.text is not None:
            publish(track, res.text)
            self._stage(track, Stage.DONE)
            return LyricsResponse(text=res.text, source=res.source, has_lyrics=True)

        key = track.identity()
        if key is None:
            publish(track, t("lyrics_not_found"))
            self._stage(track, Stage.DONE)
            return _NOT_FOUND

        self._stage(track, Stage.CHECKING_CACHE)
        cached = self.cache.load(key.artist, key.title)
        if cached is not None:
            publish(track, cached)
            self._stage(track, Stage.DONE)
            return LyricsResponse(text=cached, source="cache", has_lyrics=True)

        publish(track, t("loading"))

        # No lyrics in the tags or cache; ask providers and cache the first hit.
        self._stage(track, Stage.TRYING_SOURCES)
        for src in self.sources:
            res = src.fetch(track)
            if res.found:
                logger.info("Lyrics for %s found by %s", key.display, res.source)
                publish(track, res.text)
                self._stage(track, Stage.CACHING)
                self.cache.save(key.artist, key.title, res.text)
                self._stage(track, Stage.DONE)
                return LyricsResponse(text=res.text, source=res.source, has_lyrics=True)

        logger.info("No lyrics found for %s", key.display)
        publish(track, t("lyrics_not_found"))
        self._stage(track, Stage.DONE)
        return _NOT_FOUND

    def get_lyrics(self, track: Track) -> LyricsResponse:
        return self.update_lyrics(track)

    def remove_from_cache(self, tracks: Iterable[Track]) -> int:
        """Drop cached lyrics of the given (selected) tracks. Returns how many were removed."""
        removed = 0
        for track in tracks:
            with track.locked():
                artist = track.find_meta("artist")
                title = track.find_meta("title")
                if self.cache.exists(artist, title) and self.cache.remove(artist, title):
                    logger.info("Removed %s - %s from lyrics cache", artist, title)
                    removed += 1
        return removed
