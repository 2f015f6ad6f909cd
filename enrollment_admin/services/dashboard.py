from sqlalchemy import func
from sqlmodel import Session, select

from enrollment_admin.models import Course, CourseLevel, CourseStatus, EnrollmentRequest, RequestStatus, Student, StudentStatus
from enrollment_admin.schemas.admin import DashboardStats


def _count(session: Session, query) -> int:
    return session.exec(query).one() or 0


def dashboard_stats(session: Session) -> DashboardStats:
    request_counts = dict(
        session.exec(
            select(EnrollmentRequest.status, func.count(EnrollmentRequest.id)).group_by(EnrollmentRequest.status)
        ).all()
    )
    level_counts = dict(session.exec(select(Course.level, func.count(Course.id)).group_by(Course.level)).all())

    return DashboardStats(
        total_students=_count(session, select(func.count(Student.id))),
        active_students=_count(session, select(func.count(Student.id)).where(Student.status == StudentStatus.ACTIVE)),
        total_courses=_count(session, select(func.count(Course.id))),
        open_courses=_count(session, select(func.count(Course.id)).where(Course.status == CourseStatus.OPEN)),
        pending_requests=request_counts.get(RequestStatus.PENDING, 0),
        approved_requests=request_counts.get(RequestStatus.APPROVED, 0),
        rejected_requests=request_counts.get(RequestStatus.REJECTED, 0),
        total_waitlist=_count(session, select(func.coalesce(func.sum(Course.waitlist), 0))),
        courses_by_level={level.value: level_counts.get(level, 0) for level in CourseLevel},
    )
