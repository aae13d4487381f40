"""Raw channel adapters for the process's standard streams.

``StdioOutput`` wraps a text stream such as ``sys.stdout`` and reports its
width and color support; ``StdioInput`` tracks the paused state of an input
stream that a line editor reads from.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from rich.console import Console

from pi.ternimal.settings import TernimalSettings, load_settings

# rich color systems by bit depth
_COLOR_DEPTHS = {"standard": 4, "256": 8, "truecolor": 24, "windows": 4}


@dataclass(frozen=True)
class ResizeEvent:
    """Delivered to resize listeners.

    ``reason`` is ``None`` for a real terminal resize and set when the event
    was emitted only to make the line editor redraw its prompt.
    """

    reason: Optional[str] = None


class StdioOutput:
    """Output channel backed by a text stream (``sys.stdout`` by default)."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        settings: Optional[TernimalSettings] = None,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._settings = settings if settings is not None else load_settings()
        self._resize_listeners: list[Callable[[ResizeEvent], None]] = []

    @property
    def stream(self) -> TextIO:
        return self._stream

    @property
    def columns(self) -> Optional[int]:
        if not self.isatty():
            return None
        if self._settings.columns is not None:
            return self._settings.columns
        try:
            return os.get_terminal_size(self._stream.fileno()).columns
        except (ValueError, OSError):
            return None

    def isatty(self) -> bool:
        try:
            return self._stream.isatty()
        except ValueError:
            return False

    def get_color_depth(self) -> int:
        """Return the color depth in bits, as detected by ``rich``.

        ``NO_COLOR`` and dumb terminals report 1 bit. Whether the stream is
        a terminal at all is answered by :meth:`isatty`.
        """
        console = Console(file=self._stream, force_terminal=True)
        if console.no_color:
            return 1
        return _COLOR_DEPTHS.get(console.color_system, 1)

    def write(self, data: str) -> None:
        """Write *data* and flush; errors from a closed stream propagate."""
        self._stream.write(data)
        self._stream.flush()

        if self._settings.write_log:
            try:
                with open(self._settings.write_log, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                pass

    def flush(self) -> None:
        self._stream.flush()

    # -- resize -------------------------------------------------------------

    def on_resize(self, listener: Callable[[ResizeEvent], None]) -> None:
        self._resize_listeners.append(listener)

    def off_resize(self, listener: Callable[[ResizeEvent], None]) -> None:
        if listener in self._resize_listeners:
            self._resize_listeners.remove(listener)

    def emit_resize(self, event: Optional[ResizeEvent] = None) -> None:
        event = event if event is not None else ResizeEvent()
        for listener in list(self._resize_listeners):
            listener(event)


class StdioInput:
    """Input channel backed by a text stream (``sys.stdin`` by default).

    Reading belongs to the line editor; this only records whether input is
    paused.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._paused = False

    @property
    def stream(self) -> TextIO:
        return self._stream

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def is_paused(self) -> bool:
        return self._paused
