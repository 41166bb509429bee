"""
Text styling helpers for screen frames.

Thin wrappers around click.style so screens read as
`cyan("text")` rather than repeating keyword arguments everywhere.
"""

import click

# Box drawing and symbols
BOX_TOP_LEFT = "╭"
BOX_TOP_RIGHT = "╮"
BOX_BOTTOM_LEFT = "╰"
BOX_BOTTOM_RIGHT = "╯"
BOX_HORIZONTAL = "─"
BOX_VERTICAL = "│"

POINTER = "❯"
CHECK = "✓"
CROSS = "✗"
BLOCK_FULL = "█"
BLOCK_LIGHT = "░"


def bold(text: str) -> str:
    return click.style(text, bold=True)


def dim(text: str) -> str:
    return click.style(text, dim=True)


def red(text: str) -> str:
    return click.style(text, fg="red")


def green(text: str) -> str:
    return click.style(text, fg="green")


def yellow(text: str) -> str:
    return click.style(text, fg="yellow")


def cyan(text: str) -> str:
    return click.style(text, fg="cyan")


def bright_green(text: str) -> str:
    return click.style(text, fg="bright_green")


def bright_cyan(text: str) -> str:
    return click.style(text, fg="bright_cyan")


def bright_white(text: str) -> str:
    return click.style(text, fg="bright_white")


def color256(text: str, code: int) -> str:
    """Style text with a 256-color palette index."""
    return click.style(text, fg=code)


def strip_ansi(text: str) -> str:
    """Remove ANSI styling, e.g. to measure the visible width."""
    return click.unstyle(text)


def visible_len(text: str) -> int:
    return len(strip_ansi(text))


def pad(text: str, width: int) -> str:
    """Right-pad styled text to a visible width."""
    return text + " " * max(0, width - visible_len(text))
