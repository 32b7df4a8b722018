from __future__ import annotations

from lyricbar.player.track import Track


def make_track(meta: dict[str, str] | None = None, **fields: str) -> Track:
    """Build a Track; use `meta` for field names that are not identifiers ("unsynced lyrics")."""
    data = {**(meta or {}), **fields}
    return Track(meta=data, track_key=" | ".join(data.values()))
