"""
Helper functions for formatting data into human-readable strings.
"""


def format_size(bytes_size: int) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    size = float(bytes_size)
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1
    return f"{size:.1f} {units[i]}"


def format_time(seconds: int | float | None) -> str:
    """
    Formats a duration as a bracketed clock, e.g. '[01:02:03]', '[04:05]', '[07]'.

    Leading hours and minutes are omitted when zero.
    """
    if seconds is None:
        return ""
    s = max(0, int(seconds))
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    hours_part = f"{hours:02}:" if hours > 0 else ""
    minutes_part = f"{minutes:02}:" if minutes > 0 or hours > 0 else ""
    return f"[{hours_part}{minutes_part}{secs:02}]"


def format_count(value: int | None) -> str:
    """Formats a view count compactly (e.g., '1.2M')."""
    if value is None:
        return ""
    for threshold, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if value >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    return str(value)
