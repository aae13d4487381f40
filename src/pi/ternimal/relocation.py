"""Escape sequences that move injected output above the prompt line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pi.ternimal.types import LineEditor
from pi.ternimal.width import count_rows

_CURSOR_UP_FMT = "\x1b[{}A"
_CLEAR_FROM_CURSOR = "\x1b[0J"


@dataclass(frozen=True)
class Chunks:
    """Text written before and after an injected write."""

    before: str
    after: str


def get_columns(output: Any) -> Optional[int]:
    """Return the column count of *output*, or ``None`` when it is unknown."""
    columns = getattr(output, "columns", None)
    if isinstance(columns, bool) or not isinstance(columns, int):
        return None
    return columns if columns > 0 else None


def prompt_rows(rl: LineEditor, columns: int) -> int:
    """Return the rows taken by the prompt plus the typed line, cursor included."""
    return count_rows(rl.get_prompt() + rl.line, columns, cursor=True)


def get_chunks(rl: LineEditor, output: Any) -> Optional[Chunks]:
    """Compute the chunks framing a write so it lands above the prompt line.

    Writing ``before + data + after`` moves to a fresh line, goes up to the
    first prompt row, clears everything below, writes *data* and then
    reserves enough rows for the prompt to be redrawn. Returns ``None``
    when *rl* is not attached to a terminal or the width of *output* is
    unknown.
    """
    columns = get_columns(output)
    if not rl.terminal or columns is None:
        return None

    rows = prompt_rows(rl, columns)
    if rows <= 0:
        return None
    return Chunks(
        before="\n\r" + _CURSOR_UP_FMT.format(rows) + _CLEAR_FROM_CURSOR,
        after="\n" * (rows - 1),
    )
