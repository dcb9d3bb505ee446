from typing import Optional, List, Literal, Any
from pydantic import BaseModel, Field

from schedule_api.extraction.contracts import Section, UploadSummary


class CourseIn(BaseModel):
    program: str
    term: int
    courseCode: str = Field(min_length=1)
    courseName: str = Field(min_length=1)
    courseType: Literal["Required", "Elective"]
    userId: str = Field(min_length=1)
    courseSections: List[Section] = Field(default_factory=list)


class CourseOut(BaseModel):
    id: str
    program: str
    term: int
    courseCode: str
    courseName: str
    courseType: str
    userId: str
    courseSections: List[Section]


class CourseResponse(BaseModel):
    status: str = "success"
    message: str
    data: CourseOut

class CourseListResponse(BaseModel):
    status: str = "success"
    message: str
    data: List[CourseOut]

class UploadResponse(BaseModel):
    status: str = "success"
    message: str
    data: UploadSummary

class MessageResponse(BaseModel):
    status: str = "success"
    message: str
    data: Optional[Any] = None


class ErrorDetail(BaseModel):
    message: str
    code: str

class ErrorResponse(BaseModel):
    status: str = "error"
    error: ErrorDetail
