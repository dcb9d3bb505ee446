# schedule_api/extraction/pipeline.py
# orchestrates: OCR per file -> sections -> course drafts -> store

from __future__ import annotations

import uuid
from typing import List, Optional, Sequence, Tuple

from ..errors import MultipleRecordsError, OcrError, ScheduleError
from ..workflow_logger import log_event
from .contracts import SectionExtraction, UploadContext, UploadSummary
from .ocr import Recognizer, recognize_file, tesseract_recognize
from .reconcile import CourseStore, build_drafts, group_sections, reconcile_drafts
from .section_parser import extract_sections


def _log(batch_id: str, event: str, status: str = "running", extra: Optional[dict] = None) -> None:
    log_event(batch_id=batch_id, status=status, actor="system", event=event, extra=extra)


def extract_files(
    files: Sequence[Tuple[str, str]],
    batch_id: str,
    lang: str = "eng",
    recognizer: Recognizer = tesseract_recognize,
) -> List[SectionExtraction]:
    """
    OCR each (path, filename) one at a time and extract its sections.
    Stops at the first OCR failure.
    """
    extractions: List[SectionExtraction] = []

    for path, filename in files:
        try:
            text = recognize_file(path, filename, lang=lang, recognizer=recognizer)
        except OcrError as e:
            _log(batch_id, "OcrFailed", status="failed", extra={"filename": e.filename, "error": e.message})
            raise

        found = extract_sections(text)
        _log(
            batch_id,
            "OcrCompleted",
            extra={"filename": filename, "chars": len(text or ""), "sections": len(found)},
        )

        for ex in found:
            if ex.degraded_fields:
                _log(
                    batch_id,
                    "SectionDegraded",
                    extra={
                        "filename": filename,
                        "section_code": ex.section.sectionCode,
                        "fields": ex.degraded_fields,
                    },
                )
            if ex.lecture_type_divergent:
                _log(
                    batch_id,
                    "LectureTypeDivergent",
                    extra={
                        "section_code": ex.section.sectionCode,
                        "section_lecture_type": ex.section.sectionLectureType.value,
                        "meeting_modes": sorted({m.deliveryMode.value for m in ex.section.sectionSchedules}),
                    },
                )
        extractions.extend(found)

    return extractions


# ----------------------------
# Public API
# ----------------------------
def run_upload(
    files: Sequence[Tuple[str, str]],
    store: CourseStore,
    context: UploadContext,
    *,
    batch_id: Optional[str] = None,
    lang: str = "eng",
    recognizer: Recognizer = tesseract_recognize,
) -> UploadSummary:
    """
    Runs screenshot extraction + course reconciliation for one upload batch.

    Drafts are written one by one with no surrounding transaction: a failure
    leaves earlier drafts committed and later ones unprocessed.
    """
    batch_id = batch_id or str(uuid.uuid4())
    summary = UploadSummary(batchId=batch_id)

    _log(
        batch_id,
        "UploadReceived",
        status="received",
        extra={"file_count": len(files), "filenames": [name for _, name in files], "user_id": context.userId},
    )

    extractions = extract_files(files, batch_id, lang=lang, recognizer=recognizer)
    summary.filesProcessed = len(files)
    summary.sectionsExtracted = len(extractions)
    summary.sectionsDegraded = sum(1 for ex in extractions if ex.degraded_fields)

    groups, dropped = group_sections(ex.section for ex in extractions)
    summary.sectionsDropped = dropped
    if dropped:
        _log(batch_id, "SectionsDropped", extra={"dropped": dropped})

    try:
        for outcome in reconcile_drafts(store, build_drafts(groups, context)):
            extra = {"course_id": outcome.course_id, "course_code": outcome.course_code}
            if outcome.action == "created":
                summary.coursesCreated.append(outcome.course_id)
                _log(batch_id, "CourseCreated", extra=extra)
            else:
                summary.coursesUpdated.append(outcome.course_id)
                _log(batch_id, "CourseUpdated", extra=extra)
    except MultipleRecordsError as e:
        _log(batch_id, "ReconcileConflict", status="failed", extra={"error": e.message})
        raise
    except ScheduleError as e:
        _log(batch_id, "RequestFailed", status="failed", extra={"code": e.code, "error": e.message})
        raise

    _log(batch_id, "UploadCompleted", status="completed", extra=summary.model_dump())
    return summary
