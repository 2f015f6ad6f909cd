"""Snapshot CSV exports written under EXPORTS_DIR and served from /exports."""
import logging
import os
from datetime import datetime
from typing import Dict, List

import pandas as pd
from sqlmodel import Session, select

from enrollment_admin.config import settings
from enrollment_admin.models import Course, EnrollmentRequest, Student
from enrollment_admin.schemas.common import as_utc

logger = logging.getLogger(__name__)

EXPORTS_URL_PREFIX = "/exports"

STUDENT_COLUMNS = {
    "id": "ID",
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "phone": "Phone",
    "status": "Status",
    "student_level": "Level",
    "enrollment_date": "Enrollment Date",
}

COURSE_COLUMNS = {
    "id": "ID",
    "title": "Name",
    "description": "Description",
    "level": "Level",
    "students": "Students",
    "waitlist": "Waitlist",
    "max_students": "Max Students",
    "year": "Year",
}

ENROLLMENT_COLUMNS = {
    "id": "ID",
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "course_name": "Course",
    "student_level": "Level",
    "status": "Status",
    "created_at": "Requested At",
}


def _value(value):
    # Enums are written by value ("approved", "Beginner"), timestamps as UTC
    if isinstance(value, datetime):
        return as_utc(value)
    return getattr(value, "value", value)


def _write_csv(name: str, rows: List[Dict], columns: Dict[str, str]) -> str:
    os.makedirs(settings.EXPORTS_DIR, exist_ok=True)
    df = pd.DataFrame(rows, columns=list(columns.keys())).rename(columns=columns)
    path = os.path.join(settings.EXPORTS_DIR, f"{name}.csv")
    df.to_csv(path, index=False)
    logger.info("Exported %d %s rows to %s", len(df), name, path)
    return f"{EXPORTS_URL_PREFIX}/{name}.csv"


def export_students(session: Session) -> str:
    students = session.exec(select(Student).order_by(Student.id)).all()
    rows = [{key: _value(getattr(s, key)) for key in STUDENT_COLUMNS} for s in students]
    return _write_csv("students", rows, STUDENT_COLUMNS)


def export_courses(session: Session) -> str:
    courses = session.exec(select(Course).order_by(Course.id)).all()
    rows = [{key: _value(getattr(c, key)) for key in COURSE_COLUMNS} for c in courses]
    return _write_csv("courses", rows, COURSE_COLUMNS)


def export_enrollments(session: Session) -> str:
    requests = session.exec(select(EnrollmentRequest).order_by(EnrollmentRequest.id)).all()
    rows = []
    for r in requests:
        rows.append({
            "id": r.id,
            "first_name": r.first_name,
            "last_name": r.last_name,
            "email": r.email,
            "course_name": r.course.title if r.course else "",
            "student_level": _value(r.student_level),
            "status": _value(r.status),
            "created_at": _value(r.created_at),
        })
    return _write_csv("enrollments", rows, ENROLLMENT_COLUMNS)


EXPORTERS = {
    "students": export_students,
    "courses": export_courses,
    "enrollments": export_enrollments,
}
