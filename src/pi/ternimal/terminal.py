"""The terminal: a line editor plus write streams that print above its prompt.

A :class:`Terminal` is built from an init function returning the line
editor and the raw channels. Setup functions registered with
:meth:`Terminal.use` run immediately and again after every
:meth:`Terminal.reinit`, which swaps in a fresh line editor and raw
channels while the multiplexed streams and registered setups carry over.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, Optional

from pi.ternimal.console import Console
from pi.ternimal.output import Output, OutputStream
from pi.ternimal.prompt import PromptState
from pi.ternimal.types import (
    Cleanup,
    Context,
    InitFunction,
    InitOptions,
    LineEditor,
    PauseOptions,
    RawInput,
    RawOutput,
    ResumeOptions,
    SetupFunction,
    Status,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawStreams:
    """The raw channels from the latest init function call."""

    stdin: RawInput
    stdout: RawOutput
    stderr: Optional[RawOutput]


def _run_steps(
    steps: Iterator[Callable[[], Any]],
    on_result: Callable[[Any], None],
) -> Optional[Awaitable[None]]:
    """Run *steps* in order, synchronously until one returns an awaitable.

    From the first awaitable on, the remaining steps run inside the
    returned coroutine, each awaited before the next starts.
    """
    for step in steps:
        result = step()
        if inspect.isawaitable(result):
            return _finish_steps(result, steps, on_result)
        on_result(result)
    return None


async def _finish_steps(
    pending: Awaitable[Any],
    steps: Iterator[Callable[[], Any]],
    on_result: Callable[[Any], None],
) -> None:
    on_result(await pending)
    for step in steps:
        result = step()
        if inspect.isawaitable(result):
            result = await result
        on_result(result)


class Terminal:
    """Owns the line editor, the raw channels and the multiplexed streams."""

    def __init__(self, init: InitFunction) -> None:
        self._init = init
        self._setups: list[SetupFunction] = []
        self._cleanups: list[Cleanup] = []

        options = self._call_init(None, Context(reinit=False))
        self._rl = options.rl
        self._raw = RawStreams(options.stdin, options.stdout, options.stderr)
        self._prompt = PromptState(options.rl, options.stdout)
        self._output = Output(self._prompt, options.stdout, options.stderr)
        self._console = Console(self._output.stdout, self._output.stderr)

    def _call_init(self, terminal: Optional[Terminal], context: Context) -> InitOptions:
        options = self._init(terminal, context)
        if not isinstance(options, InitOptions):
            raise TypeError(
                f"init function must return InitOptions, got {type(options).__name__}"
            )
        return options

    # -- properties ---------------------------------------------------------

    @property
    def rl(self) -> LineEditor:
        return self._rl

    @property
    def raw(self) -> RawStreams:
        return self._raw

    @property
    def stdout(self) -> OutputStream:
        return self._output.stdout

    @property
    def stderr(self) -> OutputStream:
        return self._output.stderr

    @property
    def console(self) -> Console:
        """Console printing above the prompt line through :attr:`stdout`/:attr:`stderr`."""
        return self._console

    @property
    def is_active(self) -> bool:
        return self._prompt.active

    # -- prompt -------------------------------------------------------------

    def active(self, active: bool = True) -> Terminal:
        """Set the prompt state manually.

        While active, writes are printed above the prompt line and
        :meth:`refresh_line` redraws it. :meth:`prompt` activates the
        state and a submitted line deactivates it.
        """
        self._prompt.activate(active)
        return self

    def prompt(self, preserve_cursor: bool = False) -> Terminal:
        self._rl.prompt(preserve_cursor)
        self._prompt.activate()
        return self

    def set_prompt(self, prompt: str) -> Terminal:
        self._rl.set_prompt(prompt)
        return self.refresh_line()

    def set_line(self, line: str, refresh: bool = True) -> Terminal:
        self._rl.line = line
        return self.refresh_line() if refresh else self

    def refresh_line(self) -> Terminal:
        self._prompt.refresh_line()
        return self

    # -- pause / resume -----------------------------------------------------

    def pause(self, options: Optional[PauseOptions] = None) -> Terminal:
        """Pause input and write streams; everything when *options* is omitted."""
        if options is None or options.get("stdin"):
            self._rl.pause()
        self._output.pause(options)
        return self

    def resume(self, options: Optional[ResumeOptions] = None) -> Terminal:
        """Resume input and write streams; everything when *options* is omitted."""
        if options is None or options.get("stdin"):
            self._rl.resume()
        self._output.flush(options)
        return self

    def status(self) -> Status:
        return {
            "stdin": "paused" if self._raw.stdin.is_paused() else "resumed",
            "stdout": self._output.status("stdout"),
            "stderr": self._output.status("stderr"),
        }

    # -- setup / reinit / cleanup -------------------------------------------

    def use(self, setup: SetupFunction) -> Optional[Awaitable[None]]:
        """Register *setup*, run it now and again on every :meth:`reinit`.

        A callable returned by *setup* is kept as a cleanup for
        :meth:`cleanup`. Returns an awaitable only if *setup* did.
        """
        self._setups.append(setup)
        context = Context(reinit=False)
        return _run_steps(iter([lambda: setup(self, context)]), self._add_cleanup)

    def reinit(self, init: Optional[InitFunction] = None) -> Optional[Awaitable[None]]:
        """Replace the line editor and raw channels, then rerun all setups.

        Cleanups from earlier runs are kept; call :meth:`cleanup` before
        reinitializing to run them. Returns an awaitable only if a setup
        function returned one.
        """
        if init is not None:
            self._init = init
        context = Context(reinit=True)
        options = self._call_init(self, context)

        self._output.unpipe()
        self._rl = options.rl
        self._raw = RawStreams(options.stdin, options.stdout, options.stderr)
        self._prompt.replace(options.rl, options.stdout)
        self._output.pipe(options.stdout, options.stderr)
        logger.debug("Reinitialized terminal, rerunning %d setups", len(self._setups))

        steps = (
            (lambda setup=setup: setup(self, context)) for setup in list(self._setups)
        )
        return _run_steps(steps, self._add_cleanup)

    def cleanup(self, close: bool = True) -> Optional[Awaitable[None]]:
        """Run the cleanups from setup functions, then close the line editor.

        Each cleanup runs once, oldest first, and is dropped from the list
        before it runs. Pass ``close=False`` to keep the line editor open.
        Returns an awaitable only if a cleanup returned one.
        """
        logger.debug("Running %d cleanups", len(self._cleanups))

        def steps() -> Iterator[Callable[[], Any]]:
            while self._cleanups:
                yield self._cleanups.pop(0)
            if close:
                yield self.close

        return _run_steps(steps(), _ignore)

    def close(self) -> None:
        """Close the line editor without running cleanups.

        Text still buffered by the write streams is sent first.
        """
        self.stdout.flush()
        self.stderr.flush()
        self._rl.close()

    def _add_cleanup(self, result: Any) -> None:
        if callable(result):
            self._cleanups.append(result)


def _ignore(result: Any) -> None:
    pass


def create(init: InitFunction) -> Terminal:
    """Create a terminal from *init*, called with ``(None, Context(reinit=False))``."""
    return Terminal(init)
