from __future__ import annotations

import os
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from fastapi import (
    FastAPI,
    Depends,
    UploadFile,
    File,
    HTTPException,
    Query,
    Request,
)
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session

from schedule_api import config
from schedule_api.errors import ScheduleError, UploadValidationError
from schedule_api.extraction.contracts import UploadContext
from schedule_api.extraction.ocr import Recognizer, tesseract_recognize
from schedule_api.extraction.pipeline import run_upload
from schedule_api.models import Base
from schedule_api.repository import CourseRepository
from schedule_api.schemas import (
    CourseIn,
    CourseResponse,
    CourseListResponse,
    UploadResponse,
    MessageResponse,
)
from schedule_api.workflow_logger import log_event


# Database setup
engine = create_engine(
    config.DATABASE_URL,
    connect_args={"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

os.makedirs(config.UPLOAD_DIR, exist_ok=True)


@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Course Schedule Backend", lifespan=lifespan)


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> CourseRepository:
    return CourseRepository(db)


def get_upload_context() -> UploadContext:
    return config.upload_context_from_env()


def get_recognizer() -> Recognizer:
    return tesseract_recognize


def error_body(message: str, code: str) -> Dict[str, Any]:
    return {"status": "error", "error": {"message": message, "code": code}}


@app.exception_handler(ScheduleError)
def handle_schedule_error(request: Request, exc: ScheduleError):
    log_event(
        batch_id="-",
        status="error",
        actor="api",
        event="RequestFailed",
        extra={"method": request.method, "url": str(request.url), "code": exc.code, "error": exc.message},
    )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.code))


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    log_event(
        batch_id="-",
        status="error",
        actor="api",
        event="RequestFailed",
        extra={"method": request.method, "url": str(request.url), "code": "UNKNOWN_ERROR", "error": str(exc)},
    )
    return JSONResponse(
        status_code=500,
        content=error_body(
            "An unexpected error occurred that is not categorized by the application",
            "UNKNOWN_ERROR",
        ),
    )


def parse_course_id(courseId: str) -> uuid.UUID:
    try:
        return uuid.UUID(courseId)
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid courseId (must be a UUID)")


def read_upload(file: UploadFile) -> bytes:
    # one byte past the limit is enough to reject it
    raw = file.file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(raw) > config.MAX_UPLOAD_BYTES:
        raise UploadValidationError(
            f"File {file.filename} exceeds {config.MAX_UPLOAD_BYTES} bytes",
            status_code=413,
        )
    return raw


def save_upload(filename: Optional[str], raw: bytes) -> Dict[str, Any]:
    safe_name = f"{uuid.uuid4()}_{os.path.basename(filename or 'upload')}"
    path = os.path.join(config.UPLOAD_DIR, safe_name)
    with open(path, "wb") as f:
        f.write(raw)
    return {
        "filename": filename,
        "storage_uri": path,
        "size_bytes": len(raw),
    }


@app.get("/health", response_class=PlainTextResponse)
def health():
    return "Server is healthy"


@app.get("/health/db")
def health_db(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"ok": True}


# COURSE ROUTES
@app.get("/api/v1/courses", response_model=CourseListResponse)
def get_all_courses(
    courseCode: Optional[str] = Query(None),
    courseName: Optional[str] = Query(None),
    repo: CourseRepository = Depends(get_repository),
):
    courses = repo.query(course_code=courseCode, course_name=courseName)
    return CourseListResponse(message="Course Retrieved", data=courses)


# registered before /{courseId} routes so "upload" is never read as an id
@app.post("/api/v1/courses/upload", response_model=UploadResponse)
def upload_courses(
    courseScreenshots: Optional[List[UploadFile]] = File(None),
    repo: CourseRepository = Depends(get_repository),
    context: UploadContext = Depends(get_upload_context),
    recognizer: Recognizer = Depends(get_recognizer),
):
    # make sure the user attached the files
    if not courseScreenshots:
        raise UploadValidationError("There is no course files attached")
    if len(courseScreenshots) > config.MAX_UPLOAD_FILES:
        raise UploadValidationError(
            f"Too many files: at most {config.MAX_UPLOAD_FILES} screenshots per upload"
        )

    # every file is size-checked before any is written
    payloads = [(f.filename, read_upload(f)) for f in courseScreenshots]

    saved: List[Tuple[str, str]] = []
    for filename, raw in payloads:
        meta = save_upload(filename, raw)
        saved.append((meta["storage_uri"], meta["filename"]))

    summary = run_upload(
        saved,
        repo,
        context,
        lang=config.OCR_LANG,
        recognizer=recognizer,
    )
    return UploadResponse(message="Course updated", data=summary)


@app.get("/api/v1/courses/{courseId}", response_model=CourseResponse)
def get_course(courseId: str, repo: CourseRepository = Depends(get_repository)):
    course = repo.get(parse_course_id(courseId))
    return CourseResponse(message="Course Found", data=course)


@app.post("/api/v1/courses", response_model=CourseResponse, status_code=201)
def create_course(body: CourseIn, repo: CourseRepository = Depends(get_repository)):
    course = repo.create(body)
    return CourseResponse(message="Course Created", data=course)


@app.put("/api/v1/courses/{courseId}", response_model=CourseResponse)
def update_course(courseId: str, body: CourseIn, repo: CourseRepository = Depends(get_repository)):
    course = repo.update(parse_course_id(courseId), body)
    return CourseResponse(message="Course Updated", data=course)


@app.delete("/api/v1/courses/{courseId}", response_model=MessageResponse)
def delete_course(courseId: str, repo: CourseRepository = Depends(get_repository)):
    repo.delete(parse_course_id(courseId))
    return MessageResponse(message="Course Deleted")
