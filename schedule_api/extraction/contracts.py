from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Tuple
from pydantic import BaseModel, ConfigDict, Field


class DeliveryMode(str, Enum):
    LECTURE = "Lecture"
    ONLINE = "Online"
    MIXED = "Mixed"


# sentinels substituted when a field cannot be recovered from OCR text
UNKNOWN_TEXT = "NONE"
UNKNOWN_DATE = date(1970, 1, 1)
UNKNOWN_SEATS = 999
UNKNOWN_DAY = 99


class Extracted(BaseModel):
    """
    Parse-status container for one extracted field:
    - value: the parsed value, or the documented sentinel
    - unknown: True if the value is a sentinel because parsing failed
    """
    model_config = ConfigDict(frozen=True)

    value: Any = None
    unknown: bool = False


class ClassMeeting(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: int                      # 0=Sun..6=Sat, 99=unresolved
    deliveryMode: DeliveryMode
    startTime: int                # HHMM, e.g. 1500
    endTime: int
    location: str


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    sectionCode: str
    sectionName: str
    sectionInstructor: str
    sectionLectureType: DeliveryMode
    sectionStartDate: date
    sectionEndDate: date
    sectionSeats: int
    sectionSchedules: Tuple[ClassMeeting, ...] = ()


class SectionExtraction(BaseModel):
    """
    One section as recovered from a scan, plus how each field was obtained.
    The extractor never drops a detected section; degraded fields are reported here instead.
    """
    model_config = ConfigDict(frozen=True)

    section: Section
    fields: Dict[str, Extracted] = Field(default_factory=dict)

    @property
    def degraded_fields(self) -> List[str]:
        return [name for name, f in self.fields.items() if f.unknown]

    @property
    def lecture_type_divergent(self) -> bool:
        lt = self.section.sectionLectureType
        return any(m.deliveryMode != lt for m in self.section.sectionSchedules)


class CourseDraft(BaseModel):
    program: str
    term: int
    courseCode: str
    courseName: str
    courseType: str
    userId: str
    courseSections: List[Section] = Field(default_factory=list)


class UploadContext(BaseModel):
    """
    Fixed contextual fields applied to every draft in an upload batch.
    Configured per deployment, never derived from OCR.
    """
    program: str
    term: int
    courseType: str
    userId: str


class UploadSummary(BaseModel):
    batchId: str
    filesProcessed: int = 0
    sectionsExtracted: int = 0
    sectionsDegraded: int = 0
    sectionsDropped: int = 0
    coursesCreated: List[str] = Field(default_factory=list)
    coursesUpdated: List[str] = Field(default_factory=list)
