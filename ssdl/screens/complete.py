"""
Summary shown after a download run.
"""

from enum import Enum
from pathlib import Path
from typing import Sequence

from ssdl.download.pipeline import DownloadResult
from ssdl.screens.common import RULE, key_help
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.keys import Key
from ssdl.tui.prompts import choose_key
from ssdl.tui.renderer import Renderer
from ssdl.tui.style import bright_green, dim, green, red, yellow
from ssdl.utils import format_bytes, format_elapsed, truncate


class CompleteAction(str, Enum):
    BACK = "back"
    QUIT = "quit"


LOW_CONFIDENCE_MARK = "?"


def complete_frame(results: Sequence[DownloadResult], output_dir: Path, elapsed: float) -> str:
    """
    Frame for the summary.

    Low-confidence matches are listed with a "?" so the user knows to
    check them.
    """
    succeeded = [result for result in results if result.success]
    failed = [result for result in results if not result.success]
    total_size = sum(result.file_size or 0 for result in succeeded)

    if not failed:
        title = bright_green("  All downloads complete!")
    elif succeeded:
        title = yellow(f"  Downloads finished with {len(failed)} error(s)")
    else:
        title = red("  All downloads failed")

    lines = ["", title, ""]
    lines.append(dim("  Saved to: ") + f"{output_dir}/")
    lines.append("")

    for number, result in enumerate(succeeded, start=1):
        mark = yellow(f" {LOW_CONFIDENCE_MARK}") if result.is_low_confidence else "  "
        name = truncate(result.track.display_name, 40)
        lines.append(f"  {number:>3}.{mark} {name}  " + dim(format_bytes(result.file_size)))

    if failed:
        lines.append("")
        lines.append(red("  Failed:"))
        for result in failed:
            lines.append(red("   x ") + truncate(result.track.display_name, 40))
            lines.append(dim(f"     {result.error}"))

    if any(result.is_low_confidence for result in succeeded):
        lines.append("")
        lines.append(yellow(f"  {LOW_CONFIDENCE_MARK}") + dim(" low-confidence match, worth checking"))

    lines.append("")
    lines.append(RULE)
    lines.append(
        "  "
        + green(f"{len(succeeded)}/{len(results)} downloaded")
        + dim(f" | {format_bytes(total_size)} | {format_elapsed(elapsed)}")
    )
    lines.append(key_help("Enter go back | Q quit"))
    return "\n".join(lines)


def show_complete(
    keys: KeyDispatcher,
    renderer: Renderer,
    results: Sequence[DownloadResult],
    output_dir: Path,
    elapsed: float
) -> CompleteAction:
    frame = complete_frame(results, output_dir, elapsed)
    return choose_key(
        keys,
        {
            Key.RETURN: CompleteAction.BACK,
            Key.LOWER_Q: CompleteAction.QUIT,
            Key.UPPER_Q: CompleteAction.QUIT,
        },
        render=lambda: renderer.render(frame),
    )
