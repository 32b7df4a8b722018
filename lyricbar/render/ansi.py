from __future__ import annotations

import shutil
import signal
import sys
import textwrap
from dataclasses import dataclass
from typing import Callable

import colorama


CSI = "\x1b["


def _sgr(*codes: int) -> str:
    return CSI + ";".join(str(c) for c in codes) + "m"


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = _sgr(36, 1)  # cyan bold
    text: str = _sgr(0)
    dim: str = _sgr(90)  # bright black, for placeholders
    reset: str = _sgr(0)


def wrap_lines(lines: list[str], width: int) -> list[str]:
    out: list[str] = []
    for line in lines:
        if not line.strip():
            out.append("")
            continue
        out.extend(textwrap.wrap(line, width=max(width, 1)) or [""])
    return out


class AnsiRenderer:
    def __init__(self, use_alt_screen: bool = True, theme: Theme | None = None):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self._entered = False
        self._resize_handler: Callable[[], None] | None = None
        self._last_render_args: tuple[str, list[str], bool] | None = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        colorama.just_fix_windows_console()
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049h")  # alt screen
        sys.stdout.write(CSI + "?25l")  # hide cursor
        sys.stdout.write(CSI + "H" + CSI + "2J")  # home + clear
        sys.stdout.flush()
        self._entered = True

        # Re-wrap the last frame on terminal resize
        def _on_resize(signum=None, frame=None):
            if self._last_render_args:
                title, lines, placeholder = self._last_render_args
                self.render(title, lines, placeholder=placeholder)

        self._resize_handler = _on_resize
        signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        if self._resize_handler:
            signal.signal(signal.SIGWINCH, signal.SIG_DFL)
            self._resize_handler = None
        sys.stdout.write(self.theme.reset)
        sys.stdout.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049l")  # normal screen
        sys.stdout.flush()
        self._entered = False
        self._last_render_args = None

    def render(self, title: str, lines: list[str], *, placeholder: bool = False) -> None:
        """Draw `title` and as many wrapped `lines` as fit; placeholders are dimmed."""
        self._last_render_args = (title, lines, placeholder)

        cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        # reserve 1 line for title
        body_rows = max(rows - 1, 1)
        body = wrap_lines(lines, cols)
        style = self.theme.dim if placeholder else self.theme.text

        out: list[str] = [f"{self.theme.title}♫ {title} ♫{self.theme.reset}"]
        out.extend(f"{style}{ln}{self.theme.reset}" for ln in body[:body_rows])

        # move home + clear, then print full frame
        sys.stdout.write(CSI + "H" + CSI + "2J")
        sys.stdout.write("\n".join(out))
        sys.stdout.write(self.theme.reset)
        sys.stdout.flush()
