# schedule_api/errors.py
from __future__ import annotations

from typing import Optional


class ScheduleError(Exception):
    """Base error carrying a machine-readable code and the HTTP status to report."""

    code = "SCHEDULE_ERROR"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class OcrError(ScheduleError):
    code = "OCR_FAILED"
    status_code = 500

    def __init__(self, message: str, filename: str, **kwargs):
        super().__init__(message, **kwargs)
        self.filename = filename


class StoreError(ScheduleError):
    code = "STORE_ERROR"
    status_code = 500


class RecordNotFoundError(StoreError):
    code = "DOCUMENT_NOT_FOUND"
    status_code = 404


class MultipleRecordsError(ScheduleError):
    """More than one stored course matches a draft's (code, name, user) identity."""

    code = "MULTIPLE_RECORDS"
    status_code = 409


class UploadValidationError(ScheduleError):
    code = "INVALID_UPLOAD"
    status_code = 400
