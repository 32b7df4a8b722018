from __future__ import annotations

from pathlib import Path

import typer

from lyricbar.app import watch as watch_loop
from lyricbar.cache.files import LyricsCache
from lyricbar.config import AppConfig, load_config, save_config_lang, save_config_value
from lyricbar.i18n import available_langs, set_lang, t
from lyricbar.logging_setup import setup_logging
from lyricbar.mpris.client import MprisClient
from lyricbar.mpris.errors import MprisError
from lyricbar.player.track import Track
from lyricbar.sources.errors import DocumentTooLarge
from lyricbar.sources.service import LyricsService


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load() -> AppConfig:
    cfg = load_config()
    set_lang(cfg.lang)
    return cfg


def _pick_track(cfg: AppConfig, artist: str | None, title: str | None, player: str | None) -> Track:
    if artist is not None or title is not None:
        meta = {k: v for k, v in (("artist", artist), ("title", title)) if v is not None}
        return Track(meta=meta, track_key=" | ".join(meta.values()))
    try:
        return MprisClient.pick_player(preferred=player or cfg.preferred_player).current_track()
    except MprisError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def watch(
    player: str | None = typer.Option(None, "--player", help="MPRIS service or short name (e.g. vlc)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    refresh_hz: float | None = typer.Option(None, "--refresh-hz", help="Polling frequency (Hz)"),
    no_alt_screen: bool = typer.Option(False, "--no-alt-screen", help="Do not use alternate screen buffer"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Write logs to this file"),
):
    """
    Show lyrics of the playing track in the terminal.
    """
    cfg = _load()
    if refresh_hz is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "refresh_hz": refresh_hz})
    if no_alt_screen:
        cfg = cfg.__class__(**{**cfg.__dict__, "use_alt_screen": False})

    setup_logging(debug, log_file)
    raise typer.Exit(code=watch_loop(cfg, preferred_player=player or cfg.preferred_player, debug=debug))


@app.command()
def players():
    """List available MPRIS players."""
    for p in MprisClient.list_players():
        typer.echo(p)


@app.command()
def lyrics(
    artist: str | None = typer.Option(None, "--artist", "-a", help="Artist (default: playing track)"),
    title: str | None = typer.Option(None, "--title", "-t", help="Title (default: playing track)"),
    player: str | None = typer.Option(None, "--player", help="MPRIS service or short name"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Resolve lyrics once and print them."""
    cfg = _load()
    setup_logging(debug)
    track = _pick_track(cfg, artist, title, player)
    svc = LyricsService(cfg)
    try:
        res = svc.get_lyrics(track)
    except DocumentTooLarge as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if not res.has_lyrics or res.text is None:
        typer.echo(t("lyrics_not_found"), err=True)
        raise typer.Exit(code=1)
    typer.echo(res.text, nl=not res.text.endswith("\n"))


@app.command()
def cache(
    clear: bool = typer.Option(False, "--clear", help="Clear lyrics cache"),
    remove: bool = typer.Option(False, "--remove", help="Remove the playing (or given) track from cache"),
    path: bool = typer.Option(False, "--path", help="Print the cache directory"),
    artist: str | None = typer.Option(None, "--artist", "-a", help="Artist for --remove"),
    title: str | None = typer.Option(None, "--title", "-t", help="Title for --remove"),
    player: str | None = typer.Option(None, "--player", help="MPRIS service or short name"),
):
    """Manage lyrics cache."""
    cfg = _load()
    store = LyricsCache(cfg.cache_dir)

    if clear:
        count = store.clear()
        typer.echo(t("cache_cleared", path=str(cfg.cache_dir), count=count))
    elif remove:
        track = _pick_track(cfg, artist, title, player)
        svc = LyricsService(cfg, cache=store, sources=[])
        if svc.remove_from_cache([track]):
            typer.echo(t("cache_removed", track=track.display))
        else:
            typer.echo(t("cache_not_cached", track=track.display))
    elif path:
        typer.echo(str(cfg.cache_dir))
    else:
        typer.echo(t("cache_hint"))


@app.command()
def config(
    lang: str | None = typer.Option(None, "--lang", help="Interface language: en|ru"),
    command: str | None = typer.Option(
        None, "--command", help='Custom lyrics command, e.g. \'my-lyrics "%artist%" "%title%"\' ("" disables)'
    ),
):
    """Persist settings to config.json."""
    if lang is not None:
        if lang.lower() not in available_langs():
            raise typer.BadParameter(f"lang must be one of: {', '.join(available_langs())}")
        typer.echo(t("config_saved", path=str(save_config_lang(lang))))
    if command is not None:
        typer.echo(t("config_saved", path=str(save_config_value("customcmd", command))))
    if lang is None and command is None:
        cfg = _load()
        typer.echo(f"lang={cfg.lang}")
        typer.echo(f"customcmd={cfg.custom_command}")
        typer.echo(f"cache_dir={cfg.cache_dir}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
