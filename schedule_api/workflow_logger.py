# schedule_api/workflow_logger.py
"""
Upload-batch event log.

Each screenshot upload gets a batch id; the pipeline and the API error
handlers report what happened to it (UploadReceived, OcrCompleted,
SectionDegraded, CourseCreated, ReconcileConflict, RequestFailed, ...).
Lines go to stdout and to one run file under $WORKFLOW_LOG_DIR.
"""
from __future__ import annotations

from datetime import datetime, timezone
import json
import os
from pathlib import Path

_LOG_PATH: Path | None = None


def _get_log_path() -> Path:
    """run_YYYYMMDDTHHMMSSZ.log, created on the first event of the process."""
    global _LOG_PATH
    if _LOG_PATH is None:
        log_dir = Path(os.getenv("WORKFLOW_LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        started = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        _LOG_PATH = log_dir / f"run_{started}.log"
    return _LOG_PATH


def format_event(*, batch_id: str, status: str, actor: str, event: str, extra: dict | None = None) -> str:
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds")
    # dates and UUIDs inside summaries are rendered with str()
    payload = json.dumps(extra or {}, ensure_ascii=False, default=str)
    return f"{ts} | batch_id={batch_id} | status={status} | actor={actor} | {event} | json={payload}"


def log_event(*, batch_id: str, status: str, actor: str, event: str, extra: dict | None = None) -> None:
    line = format_event(batch_id=batch_id, status=status, actor=actor, event=event, extra=extra)

    print(line, flush=True)
    with _get_log_path().open("a", encoding="utf-8") as f:
        f.write(line + "\n")
