from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LyricsCache:
    """
    Plain-text lyrics cache: one file per (artist, title) under `cache_dir`.

    The file name is `{artist}-{title}` with every "/" replaced by "_", so
    "AC/DC" and "AC_DC" share an entry. Entries never expire.
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def key(self, artist: str, title: str) -> Path:
        artist = artist.replace("/", "_")
        title = title.replace("/", "_")
        return self.cache_dir / f"{artist}-{title}"

    def ensure_path_exists(self) -> None:
        # Raises anything other than "already exists".
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def exists(self, artist: str | None, title: str | None) -> bool:
        if artist is None or title is None:
            return False
        try:
            return self.key(artist, title).is_file()
        except OSError as e:
            # e.g. ENAMETOOLONG, which is_file() does not swallow
            logger.debug("Cache entry for %s - %s is not accessible: %s", artist, title, e)
            return False

    def load(self, artist: str, title: str) -> str | None:
        path = self.key(artist, title)
        logger.debug("Cache lookup: %s", path)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.debug("Cache miss for %s: %s", path, e)
            return None

    def save(self, artist: str, title: str, text: str) -> bool:
        path = self.key(artist, title)
        try:
            self.ensure_path_exists()
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except (OSError, ValueError) as e:
            logger.warning("Could not write lyrics cache file %s: %s", path, e)
            return False
        return True

    def remove(self, artist: str, title: str) -> bool:
        path = self.key(artist, title)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove lyrics cache file %s: %s", path, e)
            return False
        return True

    def clear(self) -> int:
        if not self.cache_dir.is_dir():
            return 0
        removed = 0
        for path in self.cache_dir.iterdir():
            if not path.is_file():
                continue
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Could not remove lyrics cache file %s: %s", path, e)
        return removed
