"""Format predictions into host display text."""

from datetime import datetime, tzinfo
from typing import Optional

from .models import DisplayText

SECONDS_PER_DAY = 86400

SEPARATOR = "›"
ERROR_MARKER = "ERR"
NO_DATA_TIME = "--:--"

PREVIEW_TIME = "00:00"
PREVIEW_DESCRIPTION = "Gate crossing preview"
ERROR_DESCRIPTION = "Gate crossing data unavailable"
NO_PREDICTION_DESCRIPTION = "No gate closing predicted"


def format_time_of_day(timestamp: int, utc_offset: int = 0, tz: Optional[tzinfo] = None) -> str:
    """Render a Unix timestamp as HH:MM, in tz if given, else shifted by utc_offset."""
    if tz is not None:
        return datetime.fromtimestamp(timestamp, tz).strftime("%H:%M")
    seconds = (timestamp + utc_offset) % SECONDS_PER_DAY
    hours, remainder = divmod(seconds, 3600)
    return f"{hours:02d}:{remainder // 60:02d}"


def present(
    now: int,
    gate_time: Optional[int],
    fetch_succeeded: bool,
    utc_offset: int = 0,
    tz: Optional[tzinfo] = None,
) -> DisplayText:
    """
    Build the display text for one refresh.

    Args:
        now: Current Unix timestamp.
        gate_time: Predicted gate closing time, or None if there is none.
        fetch_succeeded: False if the feed could not be fetched.
        utc_offset: Seconds added to both times when tz is None.
        tz: Time zone to render both times in.

    Returns:
        DisplayText of the form "HH:MM›HH:MM".
    """
    current = format_time_of_day(now, utc_offset, tz)

    if not fetch_succeeded:
        return DisplayText(f"{current}{SEPARATOR}{ERROR_MARKER}", ERROR_DESCRIPTION)

    if gate_time is None:
        return DisplayText(f"{current}{SEPARATOR}{NO_DATA_TIME}", NO_PREDICTION_DESCRIPTION)

    gate = format_time_of_day(gate_time, utc_offset, tz)
    return DisplayText(f"{current}{SEPARATOR}{gate}", f"Gate closes at {gate}")


def preview_text() -> DisplayText:
    """Static sample text with the same shape as live text."""
    return DisplayText(f"{PREVIEW_TIME}{SEPARATOR}{PREVIEW_TIME}", PREVIEW_DESCRIPTION)
