# schedule_api/repository.py
# course store: the only module that talks to the database for courses

from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schedule_api.errors import RecordNotFoundError, StoreError
from schedule_api.models import Course
from schedule_api.schemas import CourseOut

CourseId = Union[str, uuid.UUID]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def course_to_out(c: Course) -> CourseOut:
    return CourseOut(
        id=str(c.id),
        program=c.program,
        term=c.term,
        courseCode=c.course_code,
        courseName=c.course_name,
        courseType=c.course_type,
        userId=c.user_id,
        courseSections=c.course_sections or [],
    )


def _columns_from(data: BaseModel) -> Dict[str, Any]:
    d = data.model_dump(mode="json")
    return {
        "program": d["program"],
        "term": d["term"],
        "course_code": d["courseCode"],
        "course_name": d["courseName"],
        "course_type": d["courseType"],
        "user_id": d["userId"],
        "course_sections": d.get("courseSections") or [],
    }


class CourseRepository:
    """
    Store collaborator for courses.

    Every SQLAlchemy failure is rolled back and re-raised as StoreError;
    a missing id is RecordNotFoundError (404).
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to {action} in courses: {e}") from e

    def _load(self, course_id: CourseId) -> Course:
        try:
            key = course_id if isinstance(course_id, uuid.UUID) else uuid.UUID(str(course_id))
        except ValueError:
            key = None

        row = self.db.get(Course, key) if key is not None else None
        if row is None:
            raise RecordNotFoundError(f"Document not found in collection courses with id {course_id}")
        return row

    def query(self, course_code: Optional[str] = None, course_name: Optional[str] = None) -> List[CourseOut]:
        """Case-insensitive substring filter on code and/or name; no filter returns everything."""
        with self._store_errors("get documents"):
            q = self.db.query(Course)
            if course_code:
                q = q.filter(Course.course_code.icontains(course_code, autoescape=True))
            if course_name:
                q = q.filter(Course.course_name.icontains(course_name, autoescape=True))
            rows = q.order_by(Course.created_at.asc()).all()
        return [course_to_out(r) for r in rows]

    def get(self, course_id: CourseId) -> CourseOut:
        with self._store_errors("get document by id"):
            row = self._load(course_id)
        return course_to_out(row)

    def create(self, data: BaseModel) -> CourseOut:
        with self._store_errors("create document"):
            row = Course(**_columns_from(data), created_at=now_utc(), updated_at=now_utc())
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return course_to_out(row)

    def update(self, course_id: CourseId, data: BaseModel) -> CourseOut:
        with self._store_errors(f"update document with id: {course_id}"):
            row = self._load(course_id)
            for k, v in _columns_from(data).items():
                setattr(row, k, v)
            row.updated_at = now_utc()
            self.db.commit()
            self.db.refresh(row)
        return course_to_out(row)

    def delete(self, course_id: CourseId) -> None:
        with self._store_errors(f"delete document with id: {course_id}"):
            row = self._load(course_id)
            self.db.delete(row)
            self.db.commit()
