from __future__ import annotations

import pytest

from lyricbar.config import AppConfig
from lyricbar.i18n import set_lang


@pytest.fixture(autouse=True)
def _english():
    set_lang("EN")
    yield
    set_lang("EN")


@pytest.fixture
def cfg(tmp_path) -> AppConfig:
    return AppConfig(
        cache_dir=tmp_path / "cache" / "lyrics",
        config_dir=tmp_path / "config",
        lang="EN",
        custom_command="",
        script_timeout_s=5.0,
        fetch_timeout_s=10.0,
        preferred_player=None,
        refresh_hz=10.0,
        use_alt_screen=False,
    )


