from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from enrollment_admin.models import CourseLevel, RequestStatus
from .common import UTCDateTime
from .course import CourseSummary


class RequestBody(BaseModel):
    # Accept both first_name and firstName
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnrollmentCreate(RequestBody):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str
    phone: str = ""
    age: Optional[int] = Field(default=None, ge=0, le=130)
    comment: Optional[str] = None
    course_id: int
    student_level: Optional[CourseLevel] = None

    @field_validator("email")
    @classmethod
    def email_has_domain(cls, value: str) -> str:
        value = value.strip()
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return value


class CheckEnrollment(RequestBody):
    email: str = Field(min_length=1)
    course_id: int


class ApproveRequest(RequestBody):
    comment: str = ""
    version: Optional[int] = None


class RejectRequest(RequestBody):
    version: Optional[int] = None


class StatusChange(RequestBody):
    new_status: str
    comment: str = ""
    version: Optional[int] = None


class AssignCourse(RequestBody):
    new_course_id: Optional[int] = None
    comment: str = ""
    version: Optional[int] = None


class RequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    age: Optional[int] = None
    comment: Optional[str] = None
    course_id: int
    student_level: Optional[CourseLevel] = None
    status: RequestStatus
    created_at: UTCDateTime
    approved_date: Optional[UTCDateTime] = None
    rejected_date: Optional[UTCDateTime] = None
    version: int
    course: Optional[CourseSummary] = None


class RequestResult(BaseModel):
    success: bool = True
    request: RequestRead
