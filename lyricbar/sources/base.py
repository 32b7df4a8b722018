from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lyricbar.player.track import Track


@dataclass(frozen=True, slots=True)
class FetchResult:
    text: str | None
    source: str

    @property
    def found(self) -> bool:
        return bool(self.text)


class LyricsSource:
    name: str

    def fetch(self, track: Track) -> FetchResult:
        raise NotImplementedError

    def _miss(self) -> FetchResult:
        return FetchResult(None, self.name)

    def _hit(self, text: str) -> FetchResult:
        return FetchResult(text, self.name)
