"""Display width measurement and row counting for terminal text.

``visible_width`` measures how many columns a string occupies once ANSI
escape sequences are stripped and wide or zero-width glyphs are accounted
for. ``count_rows`` turns that into the number of terminal rows a string
wraps onto for a given column count.
"""

from __future__ import annotations

import math
import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Escape sequences that take up no columns
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[ -/]*[@-~]"              # CSI (SGR, cursor movement, erase)
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"    # OSC (titles, hyperlinks)
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"     # APC
)

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def strip_ansi(text: str) -> str:
    """Remove CSI, OSC and APC escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # VS16, ZWJ sequences, skin tones and flags render as one wide emoji
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Control characters, tabs included, take no columns.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# count_rows
# ---------------------------------------------------------------------------

TAB_SIZE = 8


def count_rows(text: str, columns: int, *, cursor: bool = False) -> int:
    """Return the number of terminal rows *text* occupies at *columns* wide.

    Every newline-separated segment takes at least one row. Tabs advance to
    the next multiple of ``TAB_SIZE`` columns, as the terminal renders
    them. With *cursor* set, the last segment is measured one column wider:
    the cursor sits after the text, so a line that exactly fills the
    terminal width pushes the cursor onto the next row.
    """
    if columns <= 0:
        raise ValueError(f"columns must be positive, got {columns}")

    segments = text.split("\n")
    last = len(segments) - 1
    total = 0
    for index, segment in enumerate(segments):
        if "\t" in segment:
            segment = strip_ansi(segment).expandtabs(TAB_SIZE)
        width = visible_width(segment)
        if cursor and index == last:
            width += 1
        total += math.ceil(max(width, 1) / columns)
    return total
