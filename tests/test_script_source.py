from __future__ import annotations

import subprocess
import sys
from unittest.mock import patch

import pytest

from lyricbar.sources.script import ScriptSource, bounded_command
from tests.mocks.tracks import make_track


@pytest.fixture
def track():
    return make_track(artist="Queen", title="Bohemian Rhapsody")


def _completed(stdout: bytes, returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=b"")


def test_disabled_when_template_empty(track):
    with patch("lyricbar.sources.script.subprocess.run") as run:
        res = ScriptSource(command_template="", timeout_s=None).fetch(track)
    assert res.text is None
    run.assert_not_called()


def test_runs_formatted_command(track):
    src = ScriptSource(command_template='lyrics-tool --artist "%artist%" --title "%title%"', timeout_s=5)
    with patch("lyricbar.sources.script.subprocess.run", return_value=_completed(b"Is this the real life?\n")) as run:
        res = src.fetch(track)
    assert res.text == "Is this the real life?\n"
    assert res.source == "script"
    argv = run.call_args.args[0]
    assert argv == ["lyrics-tool", "--artist", "Queen", "--title", "Bohemian Rhapsody"]
    assert run.call_args.kwargs["timeout"] == 5


def test_real_process(track):
    src = ScriptSource(
        command_template=f"{sys.executable} -c \"print('%title%')\"",
        timeout_s=30,
    )
    assert src.fetch(track).text == "Bohemian Rhapsody\n"


def test_nonzero_exit_is_a_miss(track):
    src = ScriptSource(command_template="tool", timeout_s=None)
    with patch("lyricbar.sources.script.subprocess.run", return_value=_completed(b"lyrics", returncode=1)):
        assert src.fetch(track).text is None


def test_empty_output_is_a_miss(track):
    src = ScriptSource(command_template="tool", timeout_s=None)
    with patch("lyricbar.sources.script.subprocess.run", return_value=_completed(b"")):
        assert src.fetch(track).text is None


def test_invalid_utf8_is_a_miss(track):
    src = ScriptSource(command_template="tool", timeout_s=None)
    with patch("lyricbar.sources.script.subprocess.run", return_value=_completed(b"\xc3\x28")):
        assert src.fetch(track).text is None


def test_spawn_error_is_a_miss(track):
    src = ScriptSource(command_template="definitely-not-a-command-lyricbar", timeout_s=None)
    assert src.fetch(track).text is None


def test_timeout_is_a_miss(track):
    src = ScriptSource(command_template="tool", timeout_s=1)
    with patch(
        "lyricbar.sources.script.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="tool", timeout=1),
    ):
        assert src.fetch(track).text is None


def test_zero_timeout_means_no_timeout():
    assert ScriptSource(command_template="tool", timeout_s=0).timeout_s is None


@pytest.mark.parametrize("template", ["tool %artist", "tool [%artist%", "tool 'unclosed"])
def test_invalid_template_is_a_miss(track, template):
    with patch("lyricbar.sources.script.subprocess.run") as run:
        assert ScriptSource(command_template=template, timeout_s=None).fetch(track).text is None
    run.assert_not_called()


def test_bounded_command():
    assert bounded_command("short") == "short"
    long = "é" * 3000  # 6000 bytes
    clipped = bounded_command(long)
    assert len(clipped.encode("utf-8")) <= 4095
    assert long.startswith(clipped)
