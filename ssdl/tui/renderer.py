"""
Screen renderer and shared drawing helpers.

The renderer is stateless: every call to render() clears the visible
screen and writes a complete frame. Nothing from the previous frame is
kept, so there is no partial-update bookkeeping to get wrong.

Lists longer than the available rows are windowed with visible_window(),
which every list view (search results, track table, download progress)
shares.
"""

import shutil
import sys
from typing import Sequence, TextIO

from blessed import Terminal

from ssdl.tui.style import (
    BLOCK_FULL,
    BLOCK_LIGHT,
    BOX_BOTTOM_LEFT,
    BOX_BOTTOM_RIGHT,
    BOX_HORIZONTAL,
    BOX_TOP_LEFT,
    BOX_TOP_RIGHT,
    BOX_VERTICAL,
    CHECK,
    POINTER,
    bold,
    bright_cyan,
    bright_green,
    cyan,
    dim,
    green,
    pad,
    visible_len,
)

CLEAR_SCREEN = "\x1b[2J\x1b[H"


class Renderer:
    """
    Writes full-screen frames to the terminal.

    Attributes:
        terminal: blessed Terminal providing the stream and size, or None
                  to write to a plain stream (size from shutil).
    """

    def __init__(self, terminal: Terminal | None = None, stream: TextIO | None = None) -> None:
        self.terminal = terminal
        if stream is not None:
            self.stream = stream
        elif terminal is not None:
            self.stream = terminal.stream
        else:
            self.stream = sys.stdout

    @property
    def rows(self) -> int:
        if self.terminal is not None:
            return self.terminal.height
        return shutil.get_terminal_size().lines

    @property
    def columns(self) -> int:
        if self.terminal is not None:
            return self.terminal.width
        return shutil.get_terminal_size().columns

    def render(self, frame: str) -> None:
        """Clear the screen and write the frame."""
        clear = self.terminal.home + self.terminal.clear if self.terminal is not None else CLEAR_SCREEN
        self.stream.write(clear + frame + "\n")
        self.stream.flush()


# =============================================================================
# Windowing
# =============================================================================

def visible_window(total: int, active: int, capacity: int) -> tuple[int, int]:
    """
    Compute the slice of a list to display.

    The window holds at most `capacity` entries, is centered on `active`
    where possible and is clamped so it never runs past either end.

    Args:
        total: Number of entries in the list.
        active: Index of the cursor or active entry.
        capacity: Maximum number of visible entries (at least 1 is used).

    Returns:
        (start, end) half-open range of visible indices.

    Examples:
        visible_window(50, 49, 10)  # (40, 50)
        visible_window(50, 0, 10)   # (0, 10)
        visible_window(50, 25, 10)  # (20, 30)
    """
    capacity = max(1, capacity)
    if total <= capacity:
        return 0, total

    start = max(0, active - capacity // 2)
    end = min(total, start + capacity)
    if end - start < capacity:
        start = max(0, end - capacity)
    return start, end


def window_indicator(start: int, end: int, total: int) -> str:
    """
    Describe the hidden parts of a windowed list, or "" if nothing is hidden.

    Example:
        window_indicator(40, 50, 50)  # "  41-50 of 50 · 40 above"
    """
    if start == 0 and end >= total:
        return ""

    hidden = []
    if start > 0:
        hidden.append(f"{start} above")
    if end < total:
        hidden.append(f"{total - end} below")
    return dim(f"  {start + 1}-{end} of {total} · " + " · ".join(hidden))


# =============================================================================
# Drawing helpers
# =============================================================================

def progress_bar(percent: float, width: int = 20) -> str:
    """
    Draw a progress bar such as "[██████░░░░]  60%".

    Args:
        percent: Completion from 0 to 100 (clamped).
        width: Number of cells inside the brackets.
    """
    percent = min(100.0, max(0.0, percent))
    filled = round(percent / 100 * width)
    bar = bright_green(BLOCK_FULL * filled) + dim(BLOCK_LIGHT * (width - filled))
    return f"[{bar}] {f'{round(percent)}%':>4}"


def draw_box(lines: Sequence[str], width: int = 45, padding: int = 1) -> str:
    """Draw a rounded box with each line centered inside."""
    inner = width - 2
    blank = cyan(BOX_VERTICAL) + " " * inner + cyan(BOX_VERTICAL)

    out = [cyan(BOX_TOP_LEFT + BOX_HORIZONTAL * inner + BOX_TOP_RIGHT)]
    out.extend([blank] * padding)
    for line in lines:
        gap = max(0, inner - visible_len(line))
        left = gap // 2
        out.append(cyan(BOX_VERTICAL) + " " * left + line + " " * (gap - left) + cyan(BOX_VERTICAL))
    out.extend([blank] * padding)
    out.append(cyan(BOX_BOTTOM_LEFT + BOX_HORIZONTAL * inner + BOX_BOTTOM_RIGHT))
    return "\n".join(out)


def draw_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    selected: int = -1,
    checked: set[int] | None = None
) -> str:
    """
    Draw a bordered table.

    Args:
        headers: Column titles.
        rows: Cell values, one sequence per row. Cells may be styled.
        selected: Row index to highlight as the cursor row (-1 for none).
        checked: Row indices to mark with a check mark.

    Returns:
        The table as a multi-line string.
    """
    checked = checked or set()
    widths = [
        max([visible_len(header)] + [visible_len(str(row[i])) for row in rows]) + 2
        for i, header in enumerate(headers)
    ]

    def border(left: str, joint: str, right: str) -> str:
        return dim(left) + dim(joint).join(dim("─" * w) for w in widths) + dim(right)

    lines = [" " + border("┌", "┬", "┐")]
    header_cells = [bold(cyan(pad(f" {header}", w))) for header, w in zip(headers, widths)]
    lines.append(" " + dim("│") + dim("│").join(header_cells) + dim("│"))
    lines.append(" " + border("├", "┼", "┤"))

    for index, row in enumerate(rows):
        cells = []
        for value, w in zip(row, widths):
            cell = pad(f" {value}", w)
            if index == selected:
                cell = bright_cyan(cell)
            elif index in checked:
                cell = green(cell)
            cells.append(cell)
        pointer = bright_cyan(POINTER) if index == selected else " "
        mark = green(CHECK) if index in checked else " "
        lines.append(pointer + dim("│") + dim("│").join(cells) + dim("│") + f" {mark}")

    lines.append(" " + border("└", "┴", "┘"))
    return "\n".join(lines)
