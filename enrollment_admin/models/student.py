from typing import List, Optional, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlmodel import Field, SQLModel, Relationship
from .course import CourseLevel
from .link_models import StudentCourseLink

if TYPE_CHECKING:
    from .course import Course


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Student(SQLModel, table=True):
    __tablename__ = "students"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    first_name: str
    last_name: str
    phone: str = ""
    status: StudentStatus = StudentStatus.ACTIVE
    student_level: Optional[CourseLevel] = None
    enrollment_date: Optional[datetime] = None
    approved_date: Optional[datetime] = None

    courses: List["Course"] = Relationship(back_populates="enrolled_students", link_model=StudentCourseLink)

    @property
    def course_ids(self) -> List[int]:
        return [course.id for course in self.courses]

    def __repr__(self):
        return f"<Student id={self.id} {self.email} status={self.status}>"
