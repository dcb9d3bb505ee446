# schedule_api/extraction/reconcile.py
# group sections by course code, then create / update / conflict against the store

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from ..errors import MultipleRecordsError
from .contracts import CourseDraft, Section, UploadContext

COURSE_CODE_RE = re.compile(r"^([A-Z]{2,6}-\d+)(?=-)")


class CourseStore(Protocol):
    def query(self, course_code: Optional[str] = None, course_name: Optional[str] = None) -> List[Any]: ...

    def create(self, data: Any) -> Any: ...

    def update(self, course_id: Any, data: Any) -> Any: ...


@dataclass(frozen=True)
class ReconcileOutcome:
    action: str          # "created" | "updated"
    course_id: str
    course_code: str


def course_code_of(section_code: str) -> Optional[str]:
    """Course code prefix of a section code (COMP-3018 for COMP-3018-FTE01); None if absent."""
    m = COURSE_CODE_RE.match(section_code or "")
    return m.group(1) if m else None


def group_sections(sections: Iterable[Section]) -> Tuple[Dict[str, List[Section]], int]:
    """
    Fold sections into {course_code: [sections in encounter order]}.
    Returns (groups, dropped) where dropped counts sections without a usable course code.
    """
    groups: Dict[str, List[Section]] = {}
    dropped = 0
    for s in sections:
        code = course_code_of(s.sectionCode)
        if code is None:
            dropped += 1
            continue
        groups.setdefault(code, []).append(s)
    return groups, dropped


def build_drafts(groups: Dict[str, List[Section]], context: UploadContext) -> List[CourseDraft]:
    return [
        CourseDraft(
            program=context.program,
            term=context.term,
            courseCode=code,
            courseName=sections[0].sectionName,
            courseType=context.courseType,
            userId=context.userId,
            courseSections=list(sections),
        )
        for code, sections in groups.items()
    ]


def find_existing(store: CourseStore, draft: CourseDraft) -> List[Any]:
    """Courses matching the draft by code and name (relaxed substring filter), owned by the same user."""
    candidates = store.query(course_code=draft.courseCode, course_name=draft.courseName)
    return [c for c in candidates if c.userId == draft.userId]


def reconcile_draft(store: CourseStore, draft: CourseDraft) -> ReconcileOutcome:
    """
    0 matches -> create, 1 match -> replace its sections via update,
    more than 1 -> MultipleRecordsError with no mutation.
    """
    existing = find_existing(store, draft)

    if len(existing) > 1:
        raise MultipleRecordsError(
            f"Multiple records found for course {draft.courseCode} "
            f"({draft.courseName}) owned by {draft.userId}: {len(existing)}"
        )

    if existing:
        updated = store.update(existing[0].id, draft)
        return ReconcileOutcome(action="updated", course_id=str(updated.id), course_code=draft.courseCode)

    created = store.create(draft)
    return ReconcileOutcome(action="created", course_id=str(created.id), course_code=draft.courseCode)


def reconcile_drafts(store: CourseStore, drafts: Iterable[CourseDraft]) -> Iterator[ReconcileOutcome]:
    """Sequential; the first error stops the batch and earlier writes stay committed."""
    for draft in drafts:
        yield reconcile_draft(store, draft)
