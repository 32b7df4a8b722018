from .track import PLAYLIST_LOCK, Track, TrackKey

__all__ = ["PLAYLIST_LOCK", "Track", "TrackKey"]
