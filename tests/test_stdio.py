"""Tests for pi.ternimal.stdio -- raw channel adapters."""

from __future__ import annotations

import io

import pytest

from pi.ternimal.settings import TernimalSettings
from pi.ternimal.stdio import ResizeEvent, StdioInput, StdioOutput


class FakeTTY(io.StringIO):
    def isatty(self) -> bool:
        return True


class TestStdioOutput:
    def test_write_and_flush(self) -> None:
        stream = io.StringIO()
        output = StdioOutput(stream, TernimalSettings())
        output.write("hello")
        assert stream.getvalue() == "hello"

    def test_columns_none_when_not_a_tty(self) -> None:
        output = StdioOutput(io.StringIO(), TernimalSettings(columns=100))
        assert output.isatty() is False
        assert output.columns is None

    def test_columns_override(self) -> None:
        output = StdioOutput(FakeTTY(), TernimalSettings(columns=100))
        assert output.columns == 100

    def test_columns_unknown_without_fileno(self) -> None:
        # StringIO.fileno() raises io.UnsupportedOperation (an OSError)
        output = StdioOutput(FakeTTY(), TernimalSettings())
        assert output.columns is None

    def test_closed_stream_raises(self) -> None:
        stream = io.StringIO()
        output = StdioOutput(stream, TernimalSettings())
        stream.close()
        assert output.isatty() is False
        with pytest.raises(ValueError):
            output.write("x")

    def test_write_log(self, tmp_path) -> None:
        log = tmp_path / "writes.log"
        output = StdioOutput(io.StringIO(), TernimalSettings(write_log=str(log)))
        output.write("\x1b[1A")
        output.write("text")
        assert log.read_text(encoding="utf-8") == "\x1b[1Atext"

    @pytest.mark.parametrize(
        ("env", "depth"),
        [
            ({"COLORTERM": "truecolor"}, 24),
            ({"TERM": "xterm-256color"}, 8),
            ({"TERM": "dumb"}, 1),
            ({"TERM": "xterm"}, 4),
            ({"TERM": "xterm-kitty"}, 8),
            ({"COLORTERM": "24bit", "TERM": "xterm"}, 24),
            ({"NO_COLOR": "1", "COLORTERM": "truecolor"}, 1),
        ],
    )
    def test_color_depth(self, monkeypatch: pytest.MonkeyPatch, env, depth) -> None:
        for name in ("NO_COLOR", "COLORTERM", "TERM", "FORCE_COLOR"):
            monkeypatch.delenv(name, raising=False)
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        assert StdioOutput(io.StringIO(), TernimalSettings()).get_color_depth() == depth

    def test_resize_listeners(self) -> None:
        output = StdioOutput(io.StringIO(), TernimalSettings())
        events: list[ResizeEvent] = []
        output.on_resize(events.append)
        output.emit_resize()
        output.emit_resize(ResizeEvent(reason="refresh_line"))
        output.off_resize(events.append)
        output.emit_resize()
        assert events == [ResizeEvent(), ResizeEvent(reason="refresh_line")]


class TestStdioInput:
    def test_pause_resume(self) -> None:
        stdin = StdioInput(io.StringIO())
        assert stdin.is_paused() is False
        stdin.pause()
        assert stdin.is_paused() is True
        stdin.resume()
        assert stdin.is_paused() is False
