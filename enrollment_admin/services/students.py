from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from enrollment_admin.models import CourseLevel, Student, StudentStatus
from enrollment_admin.services.errors import NotFoundError


def list_students(
    session: Session,
    status: Optional[StudentStatus] = None,
    level: Optional[CourseLevel] = None,
    q: str = "",
) -> List[Student]:
    query = select(Student)
    if status is not None:
        query = query.where(Student.status == status)
    if level is not None:
        query = query.where(Student.student_level == level)
    if q:
        like = f"%{q.strip()}%"
        query = query.where(
            or_(
                Student.email.ilike(like),
                Student.first_name.ilike(like),
                Student.last_name.ilike(like),
            )
        )
    return list(session.exec(query.order_by(Student.last_name, Student.first_name)).all())


def get_student(session: Session, student_id: int) -> Student:
    student = session.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    return student
