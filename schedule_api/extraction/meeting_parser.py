# schedule_api/extraction/meeting_parser.py
from __future__ import annotations

import re
from typing import List

from .contracts import ClassMeeting, DeliveryMode
from .timeparse import day_index, parse_clock_time

# OCR text arrives with newlines escaped as the two characters "\" + "n"
NL = r"\\n"

DAY_TOKEN = r"(?:Sun|Sat|Th|M|T|W|F)"
DAY_CLUSTER = rf"{DAY_TOKEN}(?:/[A-Z][a-z]{{0,2}})*"
CLOCK = r"\d{1,2}\s*:\s*\d{2}\s*[AaPp][Mm]"
TIME_RANGE = rf"({CLOCK})\s*[-–—]\s*({CLOCK})"
DATE_RANGE = r"\d{4}-\d{2}-\d{2}\s*[-–—]\s*\d{4}-\d{2}-\d{2}"

DAY_PREFIX_RE = re.compile(rf"^\s*({DAY_CLUSTER})(?![A-Za-z])")
TIME_RANGE_RE = re.compile(TIME_RANGE)
DATE_RANGE_RE = re.compile(DATE_RANGE)
MODE_RE = re.compile(r"Lecture|Online")
NL_RE = re.compile(NL)
WS_RE = re.compile(r"\s+")


def delivery_mode_of(text: str) -> DeliveryMode:
    """Lecture or Online when exactly one of them appears; anything else is Mixed."""
    has_lecture = "Lecture" in text
    has_online = "Online" in text
    if has_lecture and not has_online:
        return DeliveryMode.LECTURE
    if has_online and not has_lecture:
        return DeliveryMode.ONLINE
    return DeliveryMode.MIXED


def clean_location(text: str) -> str:
    return WS_RE.sub(" ", NL_RE.sub(" ", text)).strip()


def parse_meeting_block(fragment: str) -> List[ClassMeeting]:
    """
    Parse one meeting-block fragment, e.g.
      "T12:00 PM - 3:00 PM Roblin Centre (Prev. PSC)\\n2025-01-06 - 2025-04-25\\nLecture"

    Returns one ClassMeeting per day token ("M/W" yields two records that differ only by day).
    A fragment without a leading day token yields no records.
    """
    if not fragment:
        return []

    dm = DAY_PREFIX_RE.match(fragment)
    if not dm:
        return []

    days = [day_index(tok) for tok in dm.group(1).split("/")]
    rest = fragment[dm.end():]

    start_time = end_time = 0
    tm = TIME_RANGE_RE.search(rest)
    if tm:
        start_time = parse_clock_time(tm.group(1))
        end_time = parse_clock_time(tm.group(2))
        rest = rest[:tm.start()] + " " + rest[tm.end():]

    # date range is not kept, only removed from the location text
    rest = DATE_RANGE_RE.sub(" ", rest)

    mode = delivery_mode_of(rest)
    rest = MODE_RE.sub(" ", rest)

    location = clean_location(rest)

    return [
        ClassMeeting(
            day=d,
            deliveryMode=mode,
            startTime=start_time,
            endTime=end_time,
            location=location,
        )
        for d in days
    ]
