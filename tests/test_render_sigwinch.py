from __future__ import annotations

import signal
from unittest.mock import patch

from lyricbar.render.ansi import AnsiRenderer, wrap_lines


class TestAnsiRendererSigwinch:
    """Test SIGWINCH handling in renderer."""

    def test_sigwinch_registered_on_enter(self):
        renderer = AnsiRenderer(use_alt_screen=False)

        old_handler = signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        signal.signal(signal.SIGWINCH, old_handler)  # restore

        renderer.enter()

        current_handler = signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        assert current_handler != old_handler
        signal.signal(signal.SIGWINCH, old_handler)  # restore

        renderer.exit()

    def test_sigwinch_restored_on_exit(self):
        renderer = AnsiRenderer(use_alt_screen=False)

        old_handler = signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        signal.signal(signal.SIGWINCH, old_handler)  # restore

        renderer.enter()
        renderer.exit()

        current_handler = signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        assert current_handler == signal.SIG_DFL
        signal.signal(signal.SIGWINCH, old_handler)  # restore

    def test_sigwinch_redraws_last_frame(self):
        renderer = AnsiRenderer(use_alt_screen=False)
        renderer.enter()
        renderer.render("Test", ["Line 1", "Line 2"])

        with patch.object(renderer, "render") as mock_render:
            renderer._resize_handler()

        mock_render.assert_called_once_with("Test", ["Line 1", "Line 2"], placeholder=False)
        renderer.exit()

    def test_last_render_args_stored(self):
        renderer = AnsiRenderer(use_alt_screen=False)
        renderer.enter()

        assert renderer._last_render_args is None
        renderer.render("Title", ["Loading..."], placeholder=True)
        assert renderer._last_render_args == ("Title", ["Loading..."], True)

        renderer.exit()
        assert renderer._last_render_args is None


class TestRenderOutput:
    def test_frame_contains_title_and_lines(self, capsys):
        renderer = AnsiRenderer(use_alt_screen=False)
        with patch("lyricbar.render.ansi.shutil.get_terminal_size", return_value=(80, 24)):
            renderer.render("A - T", ["first", "second"])
        out = capsys.readouterr().out
        assert "♫ A - T ♫" in out
        assert "first" in out and "second" in out

    def test_lines_clipped_to_terminal_height(self, capsys):
        renderer = AnsiRenderer(use_alt_screen=False)
        with patch("lyricbar.render.ansi.shutil.get_terminal_size", return_value=(80, 3)):
            renderer.render("T", ["one", "two", "three"])
        out = capsys.readouterr().out
        assert "two" in out
        assert "three" not in out


def test_wrap_lines():
    assert wrap_lines(["aaa bbb", "", "c"], 3) == ["aaa", "bbb", "", "c"]
