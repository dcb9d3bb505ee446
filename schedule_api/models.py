import uuid
from sqlalchemy import JSON, Column, DateTime, Integer, Text, Uuid, func
from sqlalchemy.orm import declarative_base

from sqlalchemy.dialects.postgresql import JSONB

Base = declarative_base()


class Course(Base):
    __tablename__ = "courses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    program = Column(Text, nullable=False)
    term = Column(Integer, nullable=False)
    course_code = Column(Text, nullable=False, index=True)
    course_name = Column(Text, nullable=False)
    course_type = Column(Text, nullable=False)

    # owner: a student who uploaded screenshots, or "admin" for the shared catalogue
    user_id = Column(Text, nullable=False, index=True)

    # list of Section objects, each with its sectionSchedules
    course_sections = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
