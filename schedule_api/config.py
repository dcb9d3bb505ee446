# schedule_api/config.py
from __future__ import annotations

import os

from dotenv import load_dotenv

from schedule_api.extraction.contracts import UploadContext

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./schedule.db")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")

OCR_LANG = os.getenv("OCR_LANG", "eng")

# per upload request: 5 screenshots, 1 MiB each
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "5"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(1024 * 1024)))


def upload_context_from_env() -> UploadContext:
    """Program/term/type/owner applied to every course built from an upload batch."""
    return UploadContext(
        program=os.getenv("SCHEDULE_PROGRAM", "Application Design and Delivery"),
        term=int(os.getenv("SCHEDULE_TERM", "3")),
        courseType=os.getenv("SCHEDULE_COURSE_TYPE", "Required"),
        userId=os.getenv("SCHEDULE_USER_ID", "admin"),
    )
