# schedule_api/extraction/timeparse.py
from __future__ import annotations

import re
from typing import Dict, Optional

from .contracts import UNKNOWN_DAY

CLOCK_RE = re.compile(r"^\s*(\d{1,2})\s*:\s*(\d{2})\s*([AaPp])\.?\s*[Mm]\.?\s*$")

DAY_INDEX: Dict[str, int] = {
    "Sun": 0,
    "M": 1,
    "T": 2,
    "W": 3,
    "Th": 4,
    "F": 5,
    "Sat": 6,
}


def parse_clock_time(text: Optional[str]) -> int:
    """
    Convert 12-hour clock text ("3:00 PM") into a 24-hour HHMM integer (1500).

    Tolerant: empty or malformed input returns 0 instead of raising,
    so OCR noise never aborts the pipeline.
    """
    if not text:
        return 0

    m = CLOCK_RE.match(text)
    if not m:
        return 0

    hour = int(m.group(1))
    minute = int(m.group(2))
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        return 0

    # 12 AM is midnight, 12 PM is noon
    hour = hour % 12
    if m.group(3).upper() == "P":
        hour += 12

    return hour * 100 + minute


def day_index(token: Optional[str]) -> int:
    """Map a weekday abbreviation to 0=Sun..6=Sat; unknown tokens map to 99."""
    if not token:
        return UNKNOWN_DAY
    return DAY_INDEX.get(token.strip(), UNKNOWN_DAY)
