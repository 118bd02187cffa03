"""Timestamp formatting for chapter-based outputs."""


def format_timestamp(seconds: int, pad_hours: bool = False, force_hours: bool = False) -> str:
    """Format a second offset as a clock string.

    Minutes are left unpadded when there is no hours field, which is the
    form YouTube expects for chapter markers ("0:00", "12:34").

    Args:
        seconds: Offset in whole seconds (negative values clamp to 0)
        pad_hours: Zero-pad the hours field to two digits
        force_hours: Always emit an hours field, even when it is zero

    Returns:
        "M:SS", "H:MM:SS" or "HH:MM:SS"
    """
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0 or force_hours:
        hours_text = f"{hours:02d}" if pad_hours else str(hours)
        return f"{hours_text}:{minutes:02d}:{secs:02d}"

    return f"{minutes}:{secs:02d}"
