from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from enrollment_admin.models import CourseLevel, StudentStatus
from .common import UTCDateTime
from .course import CourseSummary


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    phone: str
    status: StudentStatus
    student_level: Optional[CourseLevel] = None
    enrollment_date: Optional[UTCDateTime] = None
    approved_date: Optional[UTCDateTime] = None
    courses: List[CourseSummary] = []
