from datetime import date
from typing import List, Optional
from fastapi import Form
from pydantic import BaseModel, ConfigDict, Field
from enrollment_admin.models import CourseLevel, CourseStatus
from .common import UTCDateTime


class AttachmentIn(BaseModel):
    name: str
    url: str


class AttachmentRead(AttachmentIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class CourseForm(BaseModel):
    title: str = Field(min_length=1)
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
    max_students: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    instructor: Optional[str] = None

    @classmethod
    def as_form(
        cls,
        title: str = Form(...),
        level: CourseLevel = Form(...),
        duration: str = Form(""),
        department: str = Form(""),
        status: CourseStatus = Form(CourseStatus.OPEN),
        term: str = Form(""),
        year: Optional[int] = Form(None),
        start_date: Optional[date] = Form(None),
        end_date: Optional[date] = Form(None),
        start_time: Optional[str] = Form(None),
        end_time: Optional[str] = Form(None),
        meeting_time: Optional[str] = Form(None),
        location: Optional[str] = Form(None),
        max_students: Optional[int] = Form(None),
        description: Optional[str] = Form(None),
        instructor: Optional[str] = Form(None),
    ):
        return cls(
            title=title,
            level=level,
            duration=duration,
            department=department,
            status=status,
            term=term,
            year=year,
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
            meeting_time=meeting_time,
            location=location,
            max_students=max_students,
            description=description,
            instructor=instructor,
        )


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    level: CourseLevel
    status: CourseStatus
    term: str
    year: Optional[int] = None


class CourseRead(CourseSummary):
    duration: str
    department: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    meeting_time: Optional[str] = None
    location: Optional[str] = None
    max_students: Optional[int] = None
    description: Optional[str] = None
    instructor: Optional[str] = None
    students: int
    waitlist: int
    created_at: UTCDateTime
    attachments: List[AttachmentRead] = []
