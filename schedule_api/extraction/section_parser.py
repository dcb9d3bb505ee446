# schedule_api/extraction/section_parser.py
from __future__ import annotations

import re
from datetime import date
from typing import Dict, List, Optional, Tuple

from .contracts import (
    UNKNOWN_DATE,
    UNKNOWN_SEATS,
    UNKNOWN_TEXT,
    ClassMeeting,
    DeliveryMode,
    Extracted,
    Section,
    SectionExtraction,
)
from .meeting_parser import (
    CLOCK,
    DAY_CLUSTER,
    NL,
    NL_RE,
    WS_RE,
    parse_meeting_block,
)

SECTION_CODE = r"[A-Z]{2,6}-\d+-[A-Z0-9]*\d+"

# "COMP-3018-FTE01 Add Section to Schedule" opens every section
SECTION_SPLIT_RE = re.compile(rf"(?<![A-Z])(?={SECTION_CODE} Add Section to Schedule)")
SECTION_START_RE = re.compile(rf"{SECTION_CODE} Add Section to Schedule")

# OCR garbles the glyphs after "Seats" ("Seats @)", "Seats ®", ...)
HEADER_BODY_RE = re.compile(
    rf"(?:{NL})?\s*Seats.{{0,20}}?Times\s*Locations\s*Instructors\s*(?:{NL})?"
)

HEADER_RE = re.compile(
    rf"^(.*?)Add Section to Schedule\s*{NL}(.*?){NL}\s*Runs from\s*"
    r"(\d{4}-\d{2}-\d{2})\s*[-–—]\s*(\d{4}-\d{2}-\d{2})"
)

MODE_WORD = r"(?:Lecture|Online|Mixed)"

# "Shabaga, D (Lecture, Online)", "Van Dyke, M (Lecture)"; the closing paren may be lost to a merged line
INSTRUCTOR_RE = re.compile(
    rf"([A-Z][A-Za-z'\-]+(?: [A-Z][A-Za-z'\-]+){{0,2}},\s*[A-Z])\.?\s*\({MODE_WORD}(?:,\s*{MODE_WORD})*\s*(\))?"
)

# rest of a mode list pushed onto a later line: "(Lecture,\n M 8:00 AM ... Online)"
MODE_TAIL_RE = re.compile(rf"\s*{MODE_WORD}(?:\s*,\s*{MODE_WORD})*\s*\)")

SEATS_RE = re.compile(rf"^\s*(?:{NL})?\s*(\d+)\s*/\s*(\d+)\s*/\s*(\d+)")

# a block starts at a day cluster followed by a time; never inside "M/W"
MEETING_SPLIT_RE = re.compile(rf"(?:(?<={NL})|(?<![A-Za-z/]))(?={DAY_CLUSTER}\s*{CLOCK})")


def split_sections(text: str) -> List[str]:
    """
    Split one normalized OCR text into per-section fragments.
    Text before the first section marker is discarded.
    """
    if not text:
        return []
    return [p for p in SECTION_SPLIT_RE.split(text) if SECTION_START_RE.match(p)]


def split_header_body(fragment: str) -> Tuple[str, Optional[str]]:
    """
    Split a section fragment at the "Seats ... Times Locations Instructors" marker.
    Returns (header, body); body is None when the marker is missing.
    """
    parts = HEADER_BODY_RE.split(fragment, maxsplit=1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return fragment, None


def _parse_date(raw: str) -> Extracted:
    try:
        return Extracted(value=date.fromisoformat(raw))
    except ValueError:
        return Extracted(value=UNKNOWN_DATE, unknown=True)


def parse_header(header: str) -> Tuple[Dict[str, Extracted], int]:
    """
    Extract code, name and date range from the section header.
    Returns (fields, end offset of the match); offset is 0 when nothing matched.
    """
    m = HEADER_RE.search(header)
    if not m:
        return {
            "sectionCode": Extracted(value=UNKNOWN_TEXT, unknown=True),
            "sectionName": Extracted(value=UNKNOWN_TEXT, unknown=True),
            "sectionStartDate": Extracted(value=UNKNOWN_DATE, unknown=True),
            "sectionEndDate": Extracted(value=UNKNOWN_DATE, unknown=True),
        }, 0

    name = WS_RE.sub(" ", NL_RE.sub(" ", m.group(2))).strip()
    return {
        "sectionCode": Extracted(value=m.group(1).strip()),
        "sectionName": Extracted(value=name),
        "sectionStartDate": _parse_date(m.group(3)),
        "sectionEndDate": _parse_date(m.group(4)),
    }, m.end()


def extract_instructor(body: str) -> Tuple[Extracted, str]:
    """Find the instructor and cut the match out of the body so it cannot pollute meeting parsing."""
    m = INSTRUCTOR_RE.search(body)
    if not m:
        return Extracted(value="", unknown=True), body

    rest = body[m.end():]
    if m.group(2) is None:
        # unclosed list: its tail would otherwise leak into the next meeting block
        tail = MODE_TAIL_RE.search(rest)
        if tail:
            rest = rest[:tail.start()] + " " + rest[tail.end():]
    return Extracted(value=m.group(1).strip()), body[:m.start()] + " " + rest


def extract_seats(body: str) -> Tuple[Extracted, str]:
    """Keep the middle number of the leading "open/seats/waitlist" triple."""
    m = SEATS_RE.match(body)
    if not m:
        return Extracted(value=UNKNOWN_SEATS, unknown=True), body
    return Extracted(value=int(m.group(2))), body[m.end():]


def split_meeting_blocks(body: str) -> List[str]:
    return [p for p in MEETING_SPLIT_RE.split(body) if p.strip()]


def parse_section(fragment: str) -> SectionExtraction:
    """
    Parse one section fragment into a Section.

    Tolerant: every field that cannot be recovered falls back to its sentinel
    and is marked unknown; the section itself is always produced.
    """
    header, body = split_header_body(fragment)
    fields, header_end = parse_header(header)

    if body is None:
        body = header[header_end:] if header_end else ""

    instructor, body = extract_instructor(body)
    seats, body = extract_seats(body)

    schedules: List[ClassMeeting] = []
    for block in split_meeting_blocks(body):
        schedules.extend(parse_meeting_block(block))

    fields["sectionInstructor"] = instructor
    fields["sectionSeats"] = seats
    fields["sectionSchedules"] = Extracted(value=len(schedules), unknown=not schedules)

    section = Section(
        sectionCode=fields["sectionCode"].value,
        sectionName=fields["sectionName"].value,
        sectionInstructor=instructor.value,
        # fixed default, not derived from the meetings
        sectionLectureType=DeliveryMode.MIXED,
        sectionStartDate=fields["sectionStartDate"].value,
        sectionEndDate=fields["sectionEndDate"].value,
        sectionSeats=seats.value,
        sectionSchedules=tuple(schedules),
    )
    return SectionExtraction(section=section, fields=fields)


def extract_sections(text: Optional[str]) -> List[SectionExtraction]:
    """Extract every section found in one file's normalized OCR text, in encounter order."""
    if not text:
        return []
    return [parse_section(fragment) for fragment in split_sections(text)]
