"""Tests for pi.ternimal.width -- display width and row counting."""

from __future__ import annotations

import math

import pytest

from pi.ternimal.width import count_rows, strip_ansi, visible_width


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_sgr_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[1m\x1b[36m3\x1b[39m> \x1b[0m") == 3

    def test_cursor_sequences_do_not_count(self) -> None:
        assert visible_width("\x1b[2A\x1b[0Jok") == 2

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("A世B") == 4

    def test_combining_mark_is_zero_width(self) -> None:
        # "e" followed by a combining acute accent
        assert visible_width("e\u0301") == 1

    def test_emoji_counts_as_two(self) -> None:
        assert visible_width("\U0001F600") == 2

    def test_tab_takes_no_columns(self) -> None:
        assert visible_width("\t") == 0


class TestStripAnsi:
    def test_strips_osc_title(self) -> None:
        assert strip_ansi("\x1b]0;title\x07text") == "text"

    def test_leaves_plain_text(self) -> None:
        assert strip_ansi("plain") == "plain"


# ---------------------------------------------------------------------------
# count_rows
# ---------------------------------------------------------------------------


class TestCountRows:
    """Rows taken by text at a given terminal width."""

    def test_short_line_is_one_row(self) -> None:
        assert count_rows("hello", 10) == 1

    def test_exact_fit_is_one_row(self) -> None:
        assert count_rows("x" * 10, 10) == 1

    def test_wraps_onto_second_row(self) -> None:
        assert count_rows("x" * 11, 10) == 2

    def test_empty_string_is_one_row(self) -> None:
        assert count_rows("", 10) == 1

    def test_each_newline_segment_counted(self) -> None:
        # 25 -> 3 rows, "" -> 1 row, 5 -> 1 row
        assert count_rows("x" * 25 + "\n\n" + "y" * 5, 10) == 5

    def test_matches_segment_formula(self) -> None:
        text = "abc\n世世世世世世\nlonger line here"
        expected = sum(
            math.ceil(max(visible_width(seg), 1) / 7) for seg in text.split("\n")
        )
        assert count_rows(text, 7) == expected

    def test_wide_glyphs_wrap_by_display_width(self) -> None:
        # 6 wide glyphs = 12 columns
        assert count_rows("世" * 6, 10) == 2

    def test_cursor_adds_column_to_last_segment(self) -> None:
        assert count_rows("x" * 10, 10, cursor=True) == 2
        assert count_rows("x" * 9, 10, cursor=True) == 1

    def test_cursor_only_affects_last_segment(self) -> None:
        assert count_rows("x" * 10 + "\n" + "y", 10, cursor=True) == 2

    def test_prompt_and_input_example(self) -> None:
        # "> " + "hello world" is 13 wide: ceil((13 + 1) / 10) == 2
        assert count_rows("> hello world", 10, cursor=True) == 2

    def test_tab_advances_to_next_tab_stop(self) -> None:
        # "ab\tc" renders as "ab" + 6 spaces + "c" = 9 columns
        assert count_rows("ab\tc", 8) == 2
        assert count_rows("ab\tc", 9) == 1

    def test_tab_stops_ignore_escape_sequences(self) -> None:
        assert count_rows("\x1b[31m\t\x1b[0mx", 9) == 1
        assert count_rows("\x1b[31m\t\x1b[0mx", 8) == 2

    def test_ansi_ignored_when_wrapping(self) -> None:
        assert count_rows("\x1b[31m" + "x" * 10 + "\x1b[0m", 10) == 1

    @pytest.mark.parametrize("columns", [0, -1])
    def test_non_positive_columns_rejected(self, columns: int) -> None:
        with pytest.raises(ValueError):
            count_rows("text", columns)
