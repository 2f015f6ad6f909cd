from typing import List, Optional, TYPE_CHECKING
from datetime import date, datetime, timezone
from enum import Enum
from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import CheckConstraint, Index
from .link_models import StudentCourseLink

if TYPE_CHECKING:
    from .student import Student
    from .request import EnrollmentRequest


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CourseLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class CourseStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class Course(SQLModel, table=True):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("students >= 0", name="ck_course_students_nonneg"),
        CheckConstraint("waitlist >= 0", name="ck_course_waitlist_nonneg"),
        Index("ix_course_term", "year", "term"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    level: CourseLevel
    duration: str = ""
    department: str = ""
    status: CourseStatus = CourseStatus.OPEN
    term: str = ""
    year: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    meeting_time: Optional[str] = None
    location: Optional[str] = None
    max_students: Optional[int] = None  # None means unbounded
    description: Optional[str] = None
    instructor: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    # Running totals, written only by the enrollment workflow
    students: int = 0
    waitlist: int = 0

    attachments: List["Attachment"] = Relationship(
        back_populates="course",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Attachment.position"},
    )
    enrolled_students: List["Student"] = Relationship(back_populates="courses", link_model=StudentCourseLink)
    requests: List["EnrollmentRequest"] = Relationship(back_populates="course")

    @property
    def is_full(self) -> bool:
        return self.max_students is not None and self.students >= self.max_students


class Attachment(SQLModel, table=True):
    __tablename__ = "attachments"

    id: Optional[int] = Field(default=None, primary_key=True)
    course_id: int = Field(foreign_key="courses.id", index=True)
    name: str
    url: str
    position: int = 0

    course: Course = Relationship(back_populates="attachments")
