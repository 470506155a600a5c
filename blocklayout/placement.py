# blocklayout/placement.py
import logging
import re
from typing import Any, List, Tuple

from .models import WEEKDAYS, Block

logger = logging.getLogger(__name__)

_TIME = re.compile(r"^(\d{1,2}):(\d{2})(AM|PM)$", re.IGNORECASE)


def parse_time(text: str) -> int:
    """Parse ``10:00AM`` / ``1:30PM`` to minutes since midnight."""
    m = _TIME.match(text.strip())
    if not m:
        raise ValueError(f"cannot parse time {text!r}")
    hour, minute, suffix = int(m.group(1)), int(m.group(2)), m.group(3).upper()
    if not 1 <= hour <= 12 or minute >= 60:
        raise ValueError(f"time out of range: {text!r}")
    hour %= 12
    if suffix == "PM":
        hour += 12
    return hour * 60 + minute


def parse_days(text: str) -> List[str]:
    """Split ``MoWeFr`` into two-letter weekday codes."""
    if not text or len(text) % 2:
        raise ValueError(f"cannot parse weekdays {text!r}")
    days = [text[i:i + 2] for i in range(0, len(text), 2)]
    for d in days:
        if d not in WEEKDAYS:
            raise ValueError(f"unknown weekday {d!r} in {text!r}")
    return days


def parse_meeting(text: str) -> Tuple[List[str], int, int]:
    """
    Parse a meeting such as ``MoWeFr 10:00AM - 10:50AM``.

    Returns:
        (weekday codes, start minute, end minute)
    """
    parts = text.split()
    if len(parts) != 4 or parts[2] != "-":
        raise ValueError(f"cannot parse meeting {text!r}")
    days, start, _, end = parts
    return parse_days(days), parse_time(start), parse_time(end)


def place_meeting(week, meeting: str, payload: Any = None) -> List[Block]:
    """Add one block per weekday of ``meeting`` to ``week``."""
    days, start, end = parse_meeting(meeting)
    if start == end:
        logger.warning("Skipping zero-length meeting %r (%s)", meeting, payload)
        return []
    if start > end:
        raise ValueError(f"meeting {meeting!r} ends before it starts")
    return [week.add(d, Block(start, end, payload)) for d in days]
