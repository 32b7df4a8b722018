"""
UI strings. One flat JSON file per language next to this module
(``en.json``, ``ru.json``); unknown keys render as the key itself.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib.resources import files

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"

_current = DEFAULT_LANG


@lru_cache(maxsize=None)
def available_langs() -> tuple[str, ...]:
    names = (p.name for p in files("lyricbar.i18n").iterdir())
    return tuple(sorted(n[: -len(".json")] for n in names if n.endswith(".json")))


@lru_cache(maxsize=None)
def _strings(lang: str) -> dict[str, str]:
    try:
        data = json.loads((files("lyricbar.i18n") / f"{lang}.json").read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not load %s strings: %s", lang, e)
        return {}
    return {str(k): str(v) for k, v in data.items()}


def set_lang(lang: str | None) -> str:
    """Switch language; anything unknown falls back to English. Returns the language in use."""
    global _current
    lang = (lang or DEFAULT_LANG).lower()
    _current = lang if lang in available_langs() else DEFAULT_LANG
    return _current


def t(key: str, **kwargs: str | int) -> str:
    s = _strings(_current).get(key) or _strings(DEFAULT_LANG).get(key, key)
    if not kwargs:
        return s
    try:
        return s.format(**kwargs)
    except (KeyError, IndexError):
        return s
