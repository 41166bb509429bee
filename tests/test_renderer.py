"""Tests for the renderer, windowing and drawing helpers"""

import io

import pytest

from ssdl.tui.renderer import (
    CLEAR_SCREEN,
    Renderer,
    draw_box,
    draw_table,
    progress_bar,
    visible_window,
    window_indicator,
)
from ssdl.tui.style import strip_ansi, visible_len

from fakes import FakeTerminal


class TestVisibleWindow:
    """Test the shared windowing rule"""

    @pytest.mark.parametrize("active, expected", [
        (49, (40, 50)),
        (0, (0, 10)),
        (25, (20, 30)),
        (3, (0, 10)),
        (47, (40, 50)),
    ])
    def test_fifty_items_capacity_ten(self, active, expected):
        """Centered on the active index and clamped at both ends"""
        assert visible_window(50, active, 10) == expected

    def test_short_list_is_shown_whole(self):
        """Lists that fit are not windowed"""
        assert visible_window(5, 4, 10) == (0, 5)

    def test_empty_list(self):
        """An empty list yields an empty window"""
        assert visible_window(0, 0, 10) == (0, 0)

    def test_capacity_never_below_one(self):
        """Tiny terminals still show the active entry"""
        assert visible_window(10, 4, 0) == (4, 5)

    def test_active_past_end(self):
        """An active index equal to the length shows the tail"""
        assert visible_window(20, 20, 5) == (15, 20)

    def test_window_size_matches_capacity(self):
        """The window is always full when the list is longer than capacity"""
        for active in range(30):
            start, end = visible_window(30, active, 7)
            assert end - start == 7
            assert start <= active < end


class TestWindowIndicator:
    """Test the hidden-range indicator"""

    def test_nothing_hidden(self):
        """No indicator when everything is visible"""
        assert window_indicator(0, 5, 5) == ""

    def test_hidden_above(self):
        """Entries above the window are counted"""
        assert strip_ansi(window_indicator(40, 50, 50)) == "  41-50 of 50 · 40 above"

    def test_hidden_both_sides(self):
        """Both hidden ranges are reported"""
        assert strip_ansi(window_indicator(20, 30, 50)) == "  21-30 of 50 · 20 above · 20 below"


class TestProgressBar:
    """Test progress bar drawing"""

    def test_half(self):
        """Half of the cells are filled"""
        assert strip_ansi(progress_bar(50, 10)) == "[█████░░░░░]  50%"

    def test_clamped(self):
        """Out of range values are clamped"""
        assert strip_ansi(progress_bar(150, 4)) == "[████] 100%"
        assert strip_ansi(progress_bar(-5, 4)) == "[░░░░]   0%"


class TestDrawing:
    """Test box and table drawing"""

    def test_box_lines_have_equal_width(self):
        """Every box line has the requested width"""
        box = draw_box(["short", "a somewhat longer line"], width=30)
        assert {visible_len(line) for line in box.splitlines()} == {30}

    def test_table_alignment(self):
        """Border, header and rows line up"""
        table = draw_table(["#", "Title"], [["1", "Song"], ["2", "Another song"]], selected=0, checked={1})
        lines = [strip_ansi(line) for line in table.splitlines()]
        assert len({len(line.rstrip(" ✓")) for line in lines}) == 1
        assert lines[3].startswith("❯")
        assert lines[4].endswith("✓")


class TestRenderer:
    """Test frame output"""

    def test_plain_stream_clears_and_writes(self):
        """Without a terminal the ANSI clear sequence is used"""
        stream = io.StringIO()
        Renderer(stream=stream).render("frame")
        assert stream.getvalue() == CLEAR_SCREEN + "frame\n"

    def test_terminal_clear_and_size(self):
        """With a terminal its clear sequence and size are used"""
        stream = io.StringIO()
        renderer = Renderer(FakeTerminal(), stream=stream)

        renderer.render("one")
        renderer.render("two")

        assert stream.getvalue() == "<home><clear>one\n<home><clear>two\n"
        assert renderer.rows == 30
        assert renderer.columns == 90
