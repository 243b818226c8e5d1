# backend/app/utils/time_utils.py

import re
from datetime import datetime
from typing import Any, Optional, Tuple

import pytz


UTC = pytz.utc

DEFAULT_ACTIVITY_TIME = (9, 0)

_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})")


def parse_activity_time(text: Optional[Any]) -> Tuple[int, int]:
    """
    First HH:MM found in a free-form time ("09:00", "Around 14:30").
    Anything else ("Morning") falls back to 09:00.
    """
    match = _CLOCK_RE.search("" if text is None else str(text))
    if not match:
        return DEFAULT_ACTIVITY_TIME
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return DEFAULT_ACTIVITY_TIME
    return hour, minute


def utc_now() -> datetime:
    return datetime.now(UTC)
