from __future__ import annotations

import logging
import shlex
import subprocess

from lyricbar.player.track import Track
from lyricbar.script.titleformat import MAX_OUTPUT_BYTES, TitleFormatError, compile_format

from .base import FetchResult, LyricsSource

logger = logging.getLogger(__name__)


def bounded_command(template: str) -> str:
    """Clip a configured template to the command buffer size (4096 bytes incl. NUL)."""
    raw = template.encode("utf-8")
    if len(raw) < MAX_OUTPUT_BYTES:
        return template
    logger.warning("Custom lyrics command is longer than %s bytes, truncating", MAX_OUTPUT_BYTES - 1)
    return raw[: MAX_OUTPUT_BYTES - 1].decode("utf-8", errors="ignore")


class ScriptSource(LyricsSource):
    """
    Runs the user's command template for a track and takes its stdout as lyrics.

    The template goes through title formatting (``%artist%``, ``%title%``...),
    then is split like a shell would split it and executed without a shell.
    """

    name = "script"

    def __init__(self, *, command_template: str, timeout_s: float | None):
        self.command_template = bounded_command(command_template or "")
        self.timeout_s = timeout_s or None

    def fetch(self, track: Track) -> FetchResult:
        if not self.command_template:
            return self._miss()

        try:
            command = compile_format(self.command_template).evaluate(track)
        except TitleFormatError as e:
            logger.error("Invalid script command %r: %s", self.command_template, e)
            return self._miss()

        try:
            argv = shlex.split(command)
        except ValueError as e:
            logger.error("Invalid script command %r: %s", command, e)
            return self._miss()
        if not argv:
            return self._miss()

        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Script %r timed out after %ss", argv[0], self.timeout_s)
            return self._miss()
        except OSError as e:
            logger.error("Could not run script %r: %s", argv[0], e)
            return self._miss()

        if proc.returncode != 0 or not proc.stdout:
            logger.debug("Script %r: exit status %s, %d bytes of output", argv[0], proc.returncode, len(proc.stdout))
            return self._miss()

        try:
            text = proc.stdout.decode("utf-8")
        except UnicodeDecodeError:
            logger.error("Script output is not valid UTF-8")
            return self._miss()
        return self._hit(text)
