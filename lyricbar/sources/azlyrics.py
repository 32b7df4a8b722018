from __future__ import annotations

import logging
import re

import requests

from lyricbar.player.track import Track

from .base import FetchResult, LyricsSource
from .errors import DocumentTooLarge
from .normalize import normalize

logger = logging.getLogger(__name__)

AZLYRICS_URL = "https://www.azlyrics.com/lyrics/{artist}/{title}.html"
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.114 Safari/537.36"
)
MAX_DOCUMENT_SIZE = 1 << 20
CHUNK_SIZE = 4096

# The lyrics sit in a bare <div> opened by the site's licensing comment.
_LYRICS_RE = re.compile(
    r"<div>\s*<!--(?:(?!-->).)*?Usage of azlyrics\.com content.*?-->\s*(.*?)</div>",
    re.S,
)
_BR_RE = re.compile(r"<br\s*/?\s*>")
_TAG_RE = re.compile(r"<[^>]*>")
_BRACKETS = "()[]"


def fetch_document(url: str, *, timeout: float = 10.0) -> bytes | None:
    """
    GET `url` like a desktop browser would.

    Returns None on transport errors and non-2xx answers. Raises
    DocumentTooLarge once the body grows past MAX_DOCUMENT_SIZE.
    """
    try:
        with requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout, stream=True) as r:
            if r.status_code // 100 != 2:
                logger.debug("GET %s -> HTTP %s", url, r.status_code)
                return None
            body = bytearray()
            for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                if len(body) + len(chunk) > MAX_DOCUMENT_SIZE:
                    logger.error("Document at %s is too large", url)
                    raise DocumentTooLarge(url, MAX_DOCUMENT_SIZE)
                body.extend(chunk)
            return bytes(body)
    except requests.RequestException as e:
        logger.warning("azlyrics request failed for %s: %s", url, e)
        return None


def build_url(artist: str, title: str) -> str:
    return AZLYRICS_URL.format(
        artist=requests.utils.quote(artist, safe="/"),
        title=requests.utils.quote(title, safe="/"),
    )


def drop_last_group(title: str) -> str | None:
    """
    Cut `title` right before its last bracket character.

    "song (remix)" -> "song (remix" -> "song ", one bracket per call.
    None when no bracket is left.
    """
    cut = max(title.rfind(c) for c in _BRACKETS)
    if cut < 0:
        return None
    return title[:cut]


def extract_lyrics(html: str) -> str | None:
    m = _LYRICS_RE.search(html)
    if not m:
        return None
    lyrics = _BR_RE.sub("", m.group(1))
    lyrics = _TAG_RE.sub("", lyrics)
    lyrics = lyrics.replace("&quot;", '"')
    if not lyrics:
        return None
    return lyrics.rstrip("\n") + "\n"


class AzLyricsSource(LyricsSource):
    name = "azlyrics"

    def __init__(self, *, timeout_s: float = 10.0):
        self.timeout_s = timeout_s

    def fetch_document(self, url: str) -> bytes | None:
        return fetch_document(url, timeout=self.timeout_s)

    def fetch(self, track: Track) -> FetchResult:
        with track.locked():
            artist = track.find_meta("artist")
            title = track.find_meta("title")
        if artist is None or title is None:
            return self._miss()

        artist = normalize(artist)
        title = title.lower()

        while True:
            norm_title = normalize(title)
            if not norm_title:
                return self._miss()
            url = build_url(artist, norm_title)
            logger.debug("Trying %s", url)
            doc = self.fetch_document(url)
            if doc is not None:
                break
            shorter = drop_last_group(title)
            if shorter is None:
                return self._miss()
            title = shorter

        lyrics = extract_lyrics(doc.decode("utf-8", errors="replace"))
        if lyrics is None:
            logger.info("No lyrics block found at %s", url)
            return self._miss()
        return self._hit(lyrics)
