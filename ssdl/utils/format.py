"""
Display formatting helpers shared by the screens.
"""

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")
ELLIPSIS = "…"


def format_duration(duration_ms: int | None) -> str:
    """
    Format a track duration in milliseconds as "m:ss".

    Examples:
        format_duration(213000)  # "3:33"
        format_duration(None)    # "0:00"
    """
    total_seconds = max(0, (duration_ms or 0) // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_elapsed(seconds: float) -> str:
    """
    Format elapsed wall-clock time as "m:ss" or "h:mm:ss".

    Examples:
        format_elapsed(75)     # "1:15"
        format_elapsed(3725)   # "1:02:05"
    """
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_bytes(size: int | None) -> str:
    """
    Format a byte count for humans.

    Examples:
        format_bytes(0)        # "0 B"
        format_bytes(1536)     # "1.5 KB"
        format_bytes(5242880)  # "5.0 MB"
    """
    value = float(size or 0)
    if value < 1024:
        return f"{int(value)} B"

    for unit in BYTE_UNITS[1:]:
        value /= 1024
        if value < 1024 or unit == BYTE_UNITS[-1]:
            break
    return f"{value:.1f} {unit}"


def truncate(text: str, width: int) -> str:
    """
    Shorten text to at most width characters, ending with an ellipsis.

    Examples:
        truncate("Bohemian Rhapsody", 10)  # "Bohemian …"
        truncate("Queen", 10)              # "Queen"
    """
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + ELLIPSIS
