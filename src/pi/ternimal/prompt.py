"""Prompt state: whether the line editor is currently showing a prompt."""

from __future__ import annotations

from typing import Any, Optional

from pi.ternimal.relocation import Chunks, get_chunks
from pi.ternimal.stdio import ResizeEvent
from pi.ternimal.types import LineEditor

REFRESH_LINE_REASON = "refresh_line"


class PromptState:
    """Tracks the prompt of one line editor and redraws it on request.

    The state becomes active through :meth:`activate` (after the caller
    issues a prompt) and inactive whenever the line editor submits a line.
    While inactive, output is written without relocation and
    :meth:`refresh_line` does nothing.
    """

    def __init__(self, rl: LineEditor, output: Any) -> None:
        self._rl = rl
        self._output = output
        self._active = False
        self._listening = False
        self.attach()

    @property
    def rl(self) -> LineEditor:
        return self._rl

    @property
    def active(self) -> bool:
        return self._active

    def activate(self, active: bool = True) -> None:
        self._active = active

    def attach(self) -> None:
        if not self._listening:
            self._rl.add_line_listener(self._on_line)
            self._listening = True

    def detach(self) -> None:
        if self._listening:
            self._rl.remove_line_listener(self._on_line)
            self._listening = False

    def replace(self, rl: LineEditor, output: Any) -> None:
        """Switch to a new line editor and output; the prompt starts inactive."""
        self.detach()
        self._rl = rl
        self._output = output
        self._active = False
        self.attach()

    def chunks(self) -> Optional[Chunks]:
        if not self._active:
            return None
        return get_chunks(self._rl, self._output)

    def refresh_line(self) -> None:
        """Redraw the prompt line if the prompt is active on a terminal.

        Uses the line editor's own ``refresh_line`` when it has one,
        otherwise emits a resize event tagged ``refresh_line`` on the
        output so the line editor redraws as it would after a real resize.
        """
        if not self._active or not self._rl.terminal:
            return
        refresh = getattr(self._rl, "refresh_line", None)
        if callable(refresh):
            refresh()
            return
        emit_resize = getattr(self._output, "emit_resize", None)
        if callable(emit_resize):
            emit_resize(ResizeEvent(reason=REFRESH_LINE_REASON))

    def _on_line(self, line: str) -> None:
        self._active = False
