from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from lyricbar.cli import app
from lyricbar.sources.errors import DocumentTooLarge
from lyricbar.sources.service import LyricsResponse, LyricsService

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("LYRICBAR_CACHE_DIR", str(tmp_path / "lyrics"))
    monkeypatch.delenv("LYRICBAR_CUSTOM_CMD", raising=False)
    monkeypatch.delenv("LYRICBAR_LANG", raising=False)


def test_lyrics_prints_result():
    res = LyricsResponse(text="la la\n", source="script", has_lyrics=True)
    with patch.object(LyricsService, "get_lyrics", return_value=res):
        result = runner.invoke(app, ["lyrics", "--artist", "A", "--title", "T"])
    assert result.exit_code == 0
    assert result.output == "la la\n"


def test_lyrics_not_found_exit_code():
    res = LyricsResponse(text=None, source=None, has_lyrics=False)
    with patch.object(LyricsService, "get_lyrics", return_value=res):
        result = runner.invoke(app, ["lyrics", "--artist", "A", "--title", "T"])
    assert result.exit_code == 1


def test_lyrics_oversized_page():
    with patch.object(LyricsService, "get_lyrics", side_effect=DocumentTooLarge("u", 1 << 20)):
        result = runner.invoke(app, ["lyrics", "--artist", "A", "--title", "T"])
    assert result.exit_code == 2


def test_cache_remove_and_clear(tmp_path):
    lyrics_dir = tmp_path / "lyrics"
    lyrics_dir.mkdir()
    (lyrics_dir / "A_B-T").write_text("x", encoding="utf-8")
    (lyrics_dir / "C-D").write_text("y", encoding="utf-8")

    result = runner.invoke(app, ["cache", "--remove", "--artist", "A/B", "--title", "T"])
    assert result.exit_code == 0
    assert "Removed from cache: A/B - T" in result.output
    assert not (lyrics_dir / "A_B-T").exists()

    result = runner.invoke(app, ["cache", "--remove", "--artist", "A/B", "--title", "T"])
    assert "Not in cache" in result.output

    result = runner.invoke(app, ["cache", "--clear"])
    assert result.exit_code == 0
    assert list(lyrics_dir.iterdir()) == []


def test_cache_path(tmp_path):
    result = runner.invoke(app, ["cache", "--path"])
    assert result.output.strip() == str(tmp_path / "lyrics")


def test_config_command(tmp_path):
    result = runner.invoke(app, ["config", "--command", 'tool "%artist%"'])
    assert result.exit_code == 0
    result = runner.invoke(app, ["config"])
    assert 'customcmd=tool "%artist%"' in result.output
