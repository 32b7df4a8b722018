from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote, urlparse

import dbus

from lyricbar.player.track import Track

from .errors import NoPlayersFound, PlayerUnavailable

logger = logging.getLogger(__name__)

# MPRIS metadata key -> track metadata field
_FIELDS = {
    "xesam:title": "title",
    "xesam:album": "album",
    "xesam:asText": "lyrics",
    "xesam:url": "url",
}


def _to_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return ""


def _join_artist(value: Any) -> str:
    if isinstance(value, (list, tuple, dbus.Array)):
        return ", ".join(_to_str(x) for x in value if _to_str(x))
    return _to_str(value)


def track_from_metadata(md: dict[str, Any]) -> Track:
    meta: dict[str, str] = {}
    artist = _join_artist(md.get("xesam:artist", []))
    if artist:
        meta["artist"] = artist
    for key, field in _FIELDS.items():
        value = _to_str(md.get(key, "") or "")
        if value:
            meta[field] = value

    url = meta.get("url", "")
    if url.startswith("file://"):
        meta["path"] = unquote(urlparse(url).path)

    track_id = _to_str(md.get("mpris:trackid", "")) or ""
    key = " | ".join(x for x in (meta.get("artist"), meta.get("title"), meta.get("album"), url, track_id) if x)
    return Track(meta=meta, track_key=key)


class MprisClient:
    def __init__(self, service_name: str):
        self.service_name = service_name
        self._bus = dbus.SessionBus()
        self._obj = self._bus.get_object(service_name, "/org/mpris/MediaPlayer2")
        self._props = dbus.Interface(self._obj, "org.freedesktop.DBus.Properties")

    @staticmethod
    def list_players() -> list[str]:
        try:
            bus = dbus.SessionBus()
            return [s for s in bus.list_names() if s.startswith("org.mpris.MediaPlayer2.")]
        except dbus.DBusException as e:
            # No session bus (CI, containers): same as no players.
            logger.debug("Unable to connect to D-Bus session bus: %s", e)
            return []

    @staticmethod
    def pick_player(preferred: str | None = None) -> "MprisClient":
        players = MprisClient.list_players()
        if not players:
            raise NoPlayersFound("No active MPRIS players")

        if preferred:
            # allow passing short name like "vlc"
            for s in players:
                if s == preferred or s.endswith("." + preferred):
                    return MprisClient(s)
            logger.warning("Preferred player '%s' not found, falling back", preferred)

        # prefer Playing
        for s in players:
            try:
                c = MprisClient(s)
                if c.playback_status().lower() == "playing":
                    return c
            except (dbus.DBusException, PlayerUnavailable):
                continue

        return MprisClient(players[0])

    def playback_status(self) -> str:
        try:
            return _to_str(self._props.Get("org.mpris.MediaPlayer2.Player", "PlaybackStatus"))
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def metadata(self) -> dict[str, Any]:
        try:
            md = self._props.Get("org.mpris.MediaPlayer2.Player", "Metadata")
            # dbus.Dictionary acts like dict
            return dict(md)
        except dbus.DBusException as e:
            raise PlayerUnavailable(str(e)) from e

    def current_track(self) -> Track:
        return track_from_metadata(self.metadata())
