from typing import Optional
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel, Relationship
from .course import Course, CourseLevel, utcnow


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EnrollmentRequest(SQLModel, table=True):
    __tablename__ = "requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    email: str = Field(index=True)
    phone: str = ""
    age: Optional[int] = None
    comment: Optional[str] = None
    course_id: int = Field(foreign_key="courses.id", index=True)
    student_level: Optional[CourseLevel] = None
    status: RequestStatus = Field(default=RequestStatus.PENDING, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    approved_date: Optional[datetime] = None
    rejected_date: Optional[datetime] = None
    # Optimistic lock, bumped on every transition
    version: int = 1

    course: Course = Relationship(back_populates="requests")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
