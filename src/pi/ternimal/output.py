"""Output multiplexing: write streams that print above the prompt line.

``Output`` owns one ``OutputStream`` per channel (``stdout`` and
``stderr``). Writes to an unpaused stream are framed with the relocation
chunks of the current prompt and forwarded to the raw channel, followed by
a prompt redraw. Writes to a paused stream are queued in a single list
shared by both channels so their relative order survives a resume; writes
to a muted stream are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Optional, Union

from pi.ternimal.prompt import PromptState
from pi.ternimal.types import (
    PauseOptions,
    PauseStreamOptions,
    RawOutput,
    ResumeOptions,
    StreamName,
)

logger = logging.getLogger(__name__)

STREAM_NAMES: tuple[StreamName, ...] = ("stdout", "stderr")

WriteCallback = Callable[[Optional[BaseException]], None]
PausedValue = Union[bool, PauseStreamOptions, None]


@dataclass(frozen=True)
class WriteRecord:
    """A write held back until its stream is resumed."""

    name: StreamName
    chunk: Union[str, bytes]
    encoding: Optional[str] = None
    callback: Optional[WriteCallback] = None

    def text(self) -> str:
        if isinstance(self.chunk, (bytes, bytearray)):
            return bytes(self.chunk).decode(self.encoding or "utf-8")
        return self.chunk


def is_muted(value: PausedValue) -> bool:
    return isinstance(value, dict) and bool(value.get("mute"))


def get_status(value: PausedValue) -> Literal["paused", "resumed", "muted"]:
    if is_muted(value):
        return "muted"
    return "paused" if value else "resumed"


def supports_color(raw: Any) -> bool:
    """Whether *raw* is a terminal with more than two colors."""
    isatty = getattr(raw, "isatty", None)
    if not callable(isatty) or not isatty():
        return False
    get_color_depth = getattr(raw, "get_color_depth", None)
    return not callable(get_color_depth) or get_color_depth() > 2


class OutputStream:
    """Text stream handed to callers in place of the raw output channel.

    Usable wherever a file object is expected (``print(file=...)``,
    ``logging.StreamHandler``). :meth:`write` is line buffered: text is
    held until a newline or :meth:`flush`, so the pieces of one ``print``
    call are relocated above the prompt as a single write.
    :meth:`submit` writes its chunk as one unit and additionally accepts
    bytes and a completion callback.
    """

    def __init__(self, name: StreamName, output: Output) -> None:
        self._name = name
        self._output = output
        self._tty = False
        self._pending = ""

    @property
    def name(self) -> StreamName:
        return self._name

    @property
    def encoding(self) -> str:
        return "utf-8"

    @property
    def closed(self) -> bool:
        return False

    @property
    def line_buffering(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return self._tty

    def set_tty(self, value: bool) -> None:
        self._tty = value

    def write(self, data: str) -> int:
        self._pending += data
        end = self._pending.rfind("\n") + 1
        if end:
            line, self._pending = self._pending[:end], self._pending[end:]
            self._output.transform(WriteRecord(self._name, line))
        return len(data)

    def submit(
        self,
        chunk: Union[str, bytes],
        encoding: Optional[str] = None,
        callback: Optional[WriteCallback] = None,
    ) -> None:
        """Write *chunk*, calling *callback* once it is written or dropped.

        Text still buffered by :meth:`write` goes out first. If the raw
        channel fails, the error is passed to *callback*, or raised when
        there is no callback.
        """
        self._send_pending()
        self._output.transform(WriteRecord(self._name, chunk, encoding, callback))

    def flush(self) -> None:
        self._send_pending()
        target = self._output.target(self._name)
        flush = getattr(target, "flush", None)
        if callable(flush):
            flush()

    def _send_pending(self) -> None:
        if self._pending:
            text, self._pending = self._pending, ""
            self._output.transform(WriteRecord(self._name, text))


class Output:
    """Multiplexer for the ``stdout`` and ``stderr`` write streams."""

    def __init__(
        self,
        prompt: PromptState,
        stdout: RawOutput,
        stderr: Optional[RawOutput] = None,
    ) -> None:
        self._prompt = prompt
        self._paused: dict[StreamName, PausedValue] = {"stdout": None, "stderr": None}
        self._targets: dict[StreamName, Optional[RawOutput]] = {
            "stdout": None,
            "stderr": None,
        }
        # one list for both streams to keep the order of writes
        self._writes: list[WriteRecord] = []
        # writes made while unpiped, delivered on the next pipe()
        self._held: list[WriteRecord] = []
        self._replaying = False
        self.stdout = OutputStream("stdout", self)
        self.stderr = OutputStream("stderr", self)
        self.pipe(stdout, stderr)

    @property
    def writes(self) -> tuple[WriteRecord, ...]:
        """Queued writes, oldest first."""
        return tuple(self._writes)

    def target(self, name: StreamName) -> Optional[RawOutput]:
        return self._targets[name]

    def status(self, name: StreamName) -> Literal["paused", "resumed", "muted"]:
        return get_status(self._paused[name])

    # -- piping -------------------------------------------------------------

    def pipe(self, stdout: RawOutput, stderr: Optional[RawOutput] = None) -> None:
        """Connect the streams to raw channels; ``stderr`` falls back to ``stdout``.

        Writes held while unpiped are delivered first, in order. If one of
        them fails, the rest stay held, and later writes queue behind
        them until the next ``pipe()``.
        """
        self._targets["stdout"] = stdout
        self._targets["stderr"] = stderr if stderr is not None else stdout
        for stream in (self.stdout, self.stderr):
            stream.set_tty(supports_color(self._targets[stream.name]))

        while self._held:
            self._write(self._held.pop(0))

    def unpipe(self) -> None:
        """Disconnect from the raw channels. Call before replacing them."""
        self._targets["stdout"] = None
        self._targets["stderr"] = None

    # -- pause / resume -----------------------------------------------------

    def pause(self, options: Optional[PauseOptions] = None) -> None:
        """Pause streams, or mute them with ``{"mute": True}``.

        Without *options* both streams are paused, keeping the mode of a
        stream that is already paused. A stream named in *options* takes
        the given mode even if it is already paused.
        """
        for name in STREAM_NAMES:
            if options is None:
                if not self._paused[name]:
                    self._paused[name] = True
                continue
            value = options.get(name)
            if value:
                self._paused[name] = dict(value) if isinstance(value, dict) else True
        logger.debug(
            "Paused output: stdout=%s stderr=%s",
            self.status("stdout"),
            self.status("stderr"),
        )

    def flush(self, options: Optional[ResumeOptions] = None) -> None:
        """Resume streams and write their queued writes in submission order.

        Queued writes of streams that stay paused are kept in place. Writes
        made by completion callbacks during the replay join the end of the
        queue. If a replayed write raises, streams that still have queued
        writes are paused again and the error propagates.
        """
        resumed = [
            name for name in STREAM_NAMES if options is None or options.get(name)
        ]
        if not resumed:
            return
        for name in resumed:
            self._paused[name] = None
        logger.debug("Resumed output: %s", ", ".join(resumed))
        if self._replaying:
            return

        self._replaying = True
        try:
            record = self._next_unpaused()
            while record is not None:
                self._emit(record)
                record = self._next_unpaused()
        finally:
            self._replaying = False
            for record in self._writes:
                if not self._paused[record.name]:
                    self._paused[record.name] = True

    def _next_unpaused(self) -> Optional[WriteRecord]:
        for index, record in enumerate(self._writes):
            if not self._paused[record.name]:
                return self._writes.pop(index)
        return None

    # -- writing ------------------------------------------------------------

    def transform(self, record: WriteRecord) -> None:
        paused = self._paused[record.name]
        if paused and is_muted(paused):
            if record.callback is not None:
                record.callback(None)
            return
        if paused or self._replaying:
            self._writes.append(record)
            return
        self._emit(record)

    def _emit(self, record: WriteRecord) -> None:
        if self._targets[record.name] is None or self._held:
            self._held.append(record)
            return
        self._write(record)

    def _write(self, record: WriteRecord) -> None:
        target = self._targets[record.name]
        chunks = self._prompt.chunks()
        try:
            data = record.text()
            if chunks is not None:
                data = chunks.before + data + chunks.after
            target.write(data)
        except (OSError, ValueError) as exc:
            if record.callback is None:
                raise
            record.callback(exc)
            return
        self._prompt.refresh_line()
        if record.callback is not None:
            record.callback(None)
