"""Shared types: collaborator protocols, options, status and init contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Literal,
    Optional,
    Protocol,
    TypedDict,
    Union,
)

if TYPE_CHECKING:
    from pi.ternimal.terminal import Terminal


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class LineEditor(Protocol):
    """The line-editing interface a terminal wraps.

    Implementations own prompt rendering, keystroke handling and history.
    An optional ``refresh_line()`` method is used to redraw the prompt line
    when present.
    """

    terminal: bool
    line: str

    def get_prompt(self) -> str: ...

    def set_prompt(self, prompt: str) -> None: ...

    def prompt(self, preserve_cursor: bool = False) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def close(self) -> None: ...

    def add_line_listener(self, listener: Callable[[str], None]) -> None: ...

    def remove_line_listener(self, listener: Callable[[str], None]) -> None: ...


class RawInput(Protocol):
    """The raw input channel read by the line editor."""

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def is_paused(self) -> bool: ...


class RawOutput(Protocol):
    """The raw output channel written by the multiplexer.

    Only ``write`` is required. Interactive outputs may also provide
    ``flush()``, ``isatty()``, a ``columns`` attribute, ``get_color_depth()``
    and ``emit_resize(event)``.
    """

    def write(self, data: str) -> Any: ...


# ---------------------------------------------------------------------------
# Options and status
# ---------------------------------------------------------------------------

StreamName = Literal["stdout", "stderr"]


class PauseStreamOptions(TypedDict, total=False):
    """Pause options for a write stream.

    Writes are buffered while a write stream is paused and written once it
    is resumed. Set ``mute`` to drop them instead.
    """

    mute: bool


class PauseOptions(TypedDict, total=False):
    stdin: bool
    stdout: Union[bool, PauseStreamOptions]
    stderr: Union[bool, PauseStreamOptions]


class ResumeOptions(TypedDict, total=False):
    stdin: bool
    stdout: bool
    stderr: bool


class Status(TypedDict):
    stdin: Literal["paused", "resumed"]
    stdout: Literal["paused", "resumed", "muted"]
    stderr: Literal["paused", "resumed", "muted"]


# ---------------------------------------------------------------------------
# Init / setup contracts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Context:
    """Passed to init and setup functions."""

    reinit: bool = False


@dataclass
class InitOptions:
    """Returned by an init function.

    ``stdin`` and ``stdout`` should be the input and output the line editor
    itself reads from and writes to. ``stderr`` is optional; without it the
    error stream is written to ``stdout``.
    """

    rl: LineEditor
    stdin: RawInput
    stdout: RawOutput
    stderr: Optional[RawOutput] = None


Cleanup = Callable[[], Optional[Awaitable[None]]]

InitFunction = Callable[[Optional["Terminal"], Context], InitOptions]

SetupFunction = Callable[
    ["Terminal", Context],
    Union[None, Cleanup, Awaitable[Optional[Cleanup]]],
]
