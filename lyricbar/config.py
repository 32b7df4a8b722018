from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lyricbar.i18n import available_langs

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lyricbar"
    return Path.home() / ".config" / "lyricbar"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    # Storage
    cache_dir: Path
    config_dir: Path

    # Locale
    lang: str

    # Sources
    custom_command: str
    script_timeout_s: float | None  # None: wait for the script forever
    fetch_timeout_s: float

    # MPRIS
    preferred_player: str | None

    # Rendering
    refresh_hz: float
    use_alt_screen: bool


def _read_config_json(config_dir: Path) -> dict[str, Any]:
    cfg_path = config_dir / "config.json"
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def load_config() -> AppConfig:
    config_dir = _config_dir()
    data = _read_config_json(config_dir)

    cache_env = os.getenv("LYRICBAR_CACHE_DIR")
    if cache_env:
        cache_dir = Path(cache_env)
    else:
        # XDG base dir fallback
        xdg = os.getenv("XDG_CACHE_HOME")
        cache_dir = (Path(xdg) if xdg else Path.home() / ".cache") / "lyricbar" / "lyrics"

    custom_command = data.get("customcmd")
    if not isinstance(custom_command, str):
        custom_command = os.getenv("LYRICBAR_CUSTOM_CMD", "")

    script_timeout = float(os.getenv("LYRICBAR_SCRIPT_TIMEOUT", "30"))
    use_alt_screen = os.getenv("LYRICBAR_ALT_SCREEN", "1") not in ("0", "false", "False")

    return AppConfig(
        cache_dir=cache_dir,
        config_dir=config_dir,
        lang=_load_lang(data),
        custom_command=custom_command,
        script_timeout_s=script_timeout if script_timeout > 0 else None,
        fetch_timeout_s=float(os.getenv("LYRICBAR_FETCH_TIMEOUT", "10")),
        preferred_player=os.getenv("LYRICBAR_PLAYER") or None,
        refresh_hz=float(os.getenv("LYRICBAR_REFRESH_HZ", "4.0")),
        use_alt_screen=use_alt_screen,
    )


def _load_lang(data: dict[str, Any]) -> str:
    # Priority: config.json → LYRICBAR_LANG → "EN"
    known = available_langs()
    for raw in (data.get("lang"), os.getenv("LYRICBAR_LANG")):
        if isinstance(raw, str) and raw.lower() in known:
            return raw.upper()
    return "EN"


def save_config_value(key: str, value: str) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _read_config_json(cfg_path.parent)
    data[key] = value
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path


def save_config_lang(lang: str) -> Path:
    return save_config_value("lang", lang.upper())
