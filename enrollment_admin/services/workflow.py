"""
Enrollment request workflow.

A request moves between three states::

    submit            -> pending            (course waitlist +1)
    pending  approve  -> approved           (student upserted, course students +1, waitlist -1)
    pending  reject   -> rejected           (course waitlist -1)
    approved flip     -> rejected           (student loses course, students -1, waitlist +1)
    rejected flip     -> approved           (student upserted, students +1, waitlist -1)
    any      reassign -> same status, new course

Every transition writes the request row, the course counters and the student
row in one transaction. The request row is written with a compare-and-swap on
its ``version`` column so two admins flipping the same request cannot both win.
Emails go out only after the commit and never undo a transition.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from enrollment_admin.models import (
    Course,
    CourseStatus,
    EnrollmentRequest,
    RequestStatus,
    Student,
    StudentStatus,
)
from enrollment_admin.models.course import utcnow
from enrollment_admin.schemas.request import EnrollmentCreate
from enrollment_admin.services.errors import (
    ConflictError,
    EnrollmentError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from enrollment_admin.services.notifications import Notifier
from enrollment_admin.services.preferences import notifications_enabled

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    student: Student


@dataclass(frozen=True)
class NotFound:
    email: str


StudentLookup = Union[Found, NotFound]


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_student(session: Session, email: str) -> StudentLookup:
    """Look a student up by their natural key."""
    email = normalize_email(email)
    student = session.exec(select(Student).where(Student.email == email)).first()
    if student is None:
        return NotFound(email)
    return Found(student)


def check_enrollment(session: Session, email: str, course_id: int) -> bool:
    lookup = find_student(session, email)
    if isinstance(lookup, NotFound):
        return False
    return course_id in lookup.student.course_ids


# --- Queries ---

def list_requests(session: Session, status: Optional[RequestStatus] = None) -> list[EnrollmentRequest]:
    query = select(EnrollmentRequest)
    if status is not None:
        query = query.where(EnrollmentRequest.status == status)
    query = query.order_by(EnrollmentRequest.created_at.desc(), EnrollmentRequest.id.desc())
    return list(session.exec(query).all())


def get_request(session: Session, request_id: int) -> EnrollmentRequest:
    request = session.get(EnrollmentRequest, request_id)
    if request is None:
        raise NotFoundError("Request not found")
    return request


# --- Internals ---

@contextmanager
def _transaction(session: Session):
    try:
        yield
        session.commit()
    except EnrollmentError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Enrollment transaction rolled back")
        raise StoreError("Database error; no changes were applied") from exc


def _load_request(session: Session, request_id: int, expected_version: Optional[int]) -> EnrollmentRequest:
    request = get_request(session, request_id)
    if expected_version is not None and expected_version != request.version:
        raise ConflictError(
            f"Request {request_id} was modified (version {request.version}, expected {expected_version})"
        )
    return request


def _get_course(session: Session, course_id: int, message: str = "Course not found") -> Course:
    course = session.get(Course, course_id)
    if course is None:
        raise NotFoundError(message)
    return course


def _counter(column, delta: int):
    if delta >= 0:
        return column + delta
    # Counters never go below zero
    return case((column + delta >= 0, column + delta), else_=0)


def _adjust_course(session: Session, course_id: int, *, students: int = 0, waitlist: int = 0) -> None:
    values = {}
    if students:
        values["students"] = _counter(Course.students, students)
    if waitlist:
        values["waitlist"] = _counter(Course.waitlist, waitlist)
    if not values:
        return
    result = session.execute(
        update(Course)
        .where(Course.id == course_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise NotFoundError(f"Course {course_id} not found")


def _write_request(session: Session, request_id: int, version: int, **changes) -> None:
    result = session.execute(
        update(EnrollmentRequest)
        .where(EnrollmentRequest.id == request_id, EnrollmentRequest.version == version)
        .values(version=version + 1, **changes)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ConflictError(f"Request {request_id} was modified by another operation; reload and retry")


def _enroll_student(session: Session, request: EnrollmentRequest, course: Course, *, approval: bool = True) -> Student:
    """Upsert the applicant's student record and add the course to it.

    With ``approval=False`` (course reassignment) an existing record only
    gains the course; its contact details and approval date stay as they are.
    """
    now = utcnow()
    lookup = find_student(session, request.email)
    if isinstance(lookup, Found):
        student = lookup.student
        if not approval:
            student.status = StudentStatus.ACTIVE
            if course.id not in student.course_ids:
                student.courses.append(course)
            return student
        student.first_name = request.first_name
        student.last_name = request.last_name
        student.phone = request.phone
        student.student_level = request.student_level
    else:
        student = Student(
            email=normalize_email(request.email),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            student_level=request.student_level,
            enrollment_date=now,
        )
        session.add(student)
        logger.info("Creating student record for %s", student.email)

    student.status = StudentStatus.ACTIVE
    student.approved_date = now
    if course.id not in student.course_ids:
        student.courses.append(course)
    return student


def _unenroll_student(session: Session, request: EnrollmentRequest, course_id: int) -> Optional[Student]:
    lookup = find_student(session, request.email)
    if isinstance(lookup, NotFound):
        logger.warning("No student record for %s while removing course %s", request.email, course_id)
        return None

    student = lookup.student
    # Another approved request of the same applicant may still hold this course
    still_held = session.exec(
        select(EnrollmentRequest.id).where(
            EnrollmentRequest.email == request.email,
            EnrollmentRequest.course_id == course_id,
            EnrollmentRequest.status == RequestStatus.APPROVED,
            EnrollmentRequest.id != request.id,
        )
    ).first()
    if still_held is None:
        student.courses = [c for c in student.courses if c.id != course_id]
    if not student.courses:
        student.status = StudentStatus.INACTIVE
    return student


def _notify(send, *args, **kwargs) -> None:
    try:
        send(*args, **kwargs)
    except Exception:
        logger.exception("Notification via %s failed", getattr(send, "__name__", send))


def _finish(session: Session, request_id: int) -> EnrollmentRequest:
    request = session.get(EnrollmentRequest, request_id)
    session.refresh(request)
    return request


# --- Transitions ---

def submit_request(session: Session, data: EnrollmentCreate, notifier: Optional[Notifier] = None) -> EnrollmentRequest:
    """Create a pending request and put it on the course waitlist."""
    with _transaction(session):
        course = _get_course(session, data.course_id)
        if course.status == CourseStatus.CLOSED:
            raise ValidationError(f"Course '{course.title}' is closed for enrollment")

        request = EnrollmentRequest(
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            email=normalize_email(data.email),
            phone=data.phone.strip(),
            age=data.age,
            comment=data.comment,
            course_id=course.id,
            student_level=data.student_level,
            status=RequestStatus.PENDING,
        )
        session.add(request)
        session.flush()
        _adjust_course(session, course.id, waitlist=+1)

    request = _finish(session, request.id)
    logger.info("Created request id=%s email=%s course=%s status=pending", request.id, request.email, request.course_id)

    if notifier is not None and notifications_enabled(session):
        _notify(notifier.send_submission, request, request.course)
    return request


def approve_request(
    session: Session,
    request_id: int,
    *,
    comment: str = "",
    expected_version: Optional[int] = None,
    notifier: Optional[Notifier] = None,
) -> EnrollmentRequest:
    with _transaction(session):
        request = _load_request(session, request_id, expected_version)
        if request.status != RequestStatus.PENDING:
            raise InvalidTransitionError(f"Cannot approve a request that is already {request.status.value}")

        course = _get_course(session, request.course_id)
        if course.is_full:
            logger.warning(
                "Approving request %s beyond capacity of course %s (%s/%s)",
                request_id, course.id, course.students, course.max_students,
            )
        version = request.version
        _enroll_student(session, request, course)
        _write_request(
            session, request_id, version,
            status=RequestStatus.APPROVED, approved_date=utcnow(), rejected_date=None,
        )
        _adjust_course(session, course.id, students=+1, waitlist=-1)

    request = _finish(session, request_id)
    logger.info("Approved request id=%s course=%s", request_id, request.course_id)

    if notifier is not None and notifications_enabled(session):
        _notify(notifier.send_approval, request, request.course, comment)
    return request


def reject_request(
    session: Session,
    request_id: int,
    *,
    expected_version: Optional[int] = None,
    notifier: Optional[Notifier] = None,
) -> EnrollmentRequest:
    with _transaction(session):
        request = _load_request(session, request_id, expected_version)
        if request.status != RequestStatus.PENDING:
            raise InvalidTransitionError(f"Cannot reject a request that is already {request.status.value}")

        _write_request(
            session, request_id, request.version,
            status=RequestStatus.REJECTED, rejected_date=utcnow(), approved_date=None,
        )
        _adjust_course(session, request.course_id, waitlist=-1)

    request = _finish(session, request_id)
    logger.info("Rejected request id=%s course=%s", request_id, request.course_id)

    if notifier is not None:
        _notify(notifier.send_rejection, request, request.course)
    return request


def change_request_status(
    session: Session,
    request_id: int,
    new_status: Union[RequestStatus, str],
    *,
    comment: str = "",
    expected_version: Optional[int] = None,
    notifier: Optional[Notifier] = None,
) -> EnrollmentRequest:
    """Flip a decided request between approved and rejected."""
    try:
        new_status = RequestStatus(new_status)
    except ValueError:
        raise ValidationError("Invalid status. Must be 'approved' or 'rejected'") from None
    if new_status == RequestStatus.PENDING:
        raise ValidationError("Invalid status. Must be 'approved' or 'rejected'")

    with _transaction(session):
        request = _load_request(session, request_id, expected_version)
        current = request.status
        version = request.version

        if current == new_status:
            raise InvalidTransitionError(f"Request is already {current.value}")

        if current == RequestStatus.APPROVED and new_status == RequestStatus.REJECTED:
            _unenroll_student(session, request, request.course_id)
            _adjust_course(session, request.course_id, students=-1, waitlist=+1)
            _write_request(
                session, request_id, version,
                status=RequestStatus.REJECTED, rejected_date=utcnow(), approved_date=None,
            )
        elif current == RequestStatus.REJECTED and new_status == RequestStatus.APPROVED:
            course = _get_course(session, request.course_id)
            _enroll_student(session, request, course)
            _adjust_course(session, course.id, students=+1, waitlist=-1)
            _write_request(
                session, request_id, version,
                status=RequestStatus.APPROVED, approved_date=utcnow(), rejected_date=None,
            )
        else:
            raise InvalidTransitionError(
                f"Invalid status change from {current.value}; pending requests must be approved or rejected first"
            )

    request = _finish(session, request_id)
    logger.info("Request id=%s status changed %s -> %s", request_id, current.value, new_status.value)

    if notifier is not None:
        if new_status == RequestStatus.APPROVED:
            if notifications_enabled(session):
                _notify(notifier.send_approval, request, request.course, comment)
        else:
            _notify(notifier.send_rejection, request, request.course)
    return request


def reassign_course(
    session: Session,
    request_id: int,
    new_course_id: Optional[int],
    *,
    comment: str = "",
    expected_version: Optional[int] = None,
    notifier: Optional[Notifier] = None,
) -> EnrollmentRequest:
    """Move a request to another course, keeping its decision."""
    if not new_course_id:
        raise ValidationError("New course ID is required")

    with _transaction(session):
        request = _load_request(session, request_id, expected_version)
        new_course = _get_course(session, new_course_id, "New course not found")
        old_course_id = request.course_id
        if old_course_id == new_course.id:
            raise InvalidTransitionError("Request is already assigned to this course")
        was_approved = request.status == RequestStatus.APPROVED
        version = request.version

        if was_approved:
            _unenroll_student(session, request, old_course_id)
            _enroll_student(session, request, new_course, approval=False)
            _adjust_course(session, old_course_id, students=-1, waitlist=+1)
            _adjust_course(session, new_course.id, students=+1, waitlist=-1)
        else:
            _adjust_course(session, old_course_id, waitlist=-1)
            _adjust_course(session, new_course.id, waitlist=+1)

        _write_request(session, request_id, version, course_id=new_course.id)

    request = _finish(session, request_id)
    logger.info("Request id=%s reassigned from course %s to %s", request_id, old_course_id, request.course_id)

    if notifier is not None and was_approved and notifications_enabled(session):
        _notify(notifier.send_approval, request, request.course, comment, reassigned=True)
    return request
