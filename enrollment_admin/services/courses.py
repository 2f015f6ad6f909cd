import json
import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session, select

from enrollment_admin.models import Attachment, Course, CourseLevel, CourseStatus, EnrollmentRequest
from enrollment_admin.schemas.course import AttachmentIn, CourseForm
from enrollment_admin.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def parse_attachments(raw: Optional[str]) -> List[AttachmentIn]:
    """Parse the JSON-encoded list of already stored {name, url} attachments."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"attachments must be a JSON array: {exc.msg}") from exc
    if not isinstance(data, list):
        raise ValidationError("attachments must be a JSON array")
    try:
        return [AttachmentIn.model_validate(item) for item in data]
    except PydanticValidationError as exc:
        raise ValidationError("each attachment needs a name and a url") from exc


def _build_attachments(items: Iterable[AttachmentIn]) -> List[Attachment]:
    return [Attachment(name=item.name, url=item.url, position=i) for i, item in enumerate(items)]


def list_courses(
    session: Session,
    status: Optional[CourseStatus] = None,
    level: Optional[CourseLevel] = None,
) -> List[Course]:
    query = select(Course)
    if status is not None:
        query = query.where(Course.status == status)
    if level is not None:
        query = query.where(Course.level == level)
    return list(session.exec(query.order_by(Course.id)).all())


def get_course(session: Session, course_id: int) -> Course:
    course = session.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def create_course(session: Session, form: CourseForm, attachments: Iterable[AttachmentIn] = ()) -> Course:
    course = Course(**form.model_dump())
    course.attachments = _build_attachments(attachments)
    session.add(course)
    session.commit()
    session.refresh(course)
    logger.info("Created course id=%s title=%s", course.id, course.title)
    return course


def update_course(
    session: Session, course_id: int, form: CourseForm, attachments: Iterable[AttachmentIn] = ()
) -> Course:
    """Overwrite the editable fields and replace the whole attachment list.

    The enrolled/waitlist counters are left alone.
    """
    course = get_course(session, course_id)
    for key, value in form.model_dump().items():
        setattr(course, key, value)
    course.attachments = _build_attachments(attachments)
    session.add(course)
    session.commit()
    session.refresh(course)
    logger.info("Updated course id=%s", course.id)
    return course


def delete_course(session: Session, course_id: int) -> None:
    course = get_course(session, course_id)
    has_requests = session.exec(
        select(EnrollmentRequest.id).where(EnrollmentRequest.course_id == course_id)
    ).first()
    if has_requests is not None:
        raise ValidationError("Course has enrollment requests and cannot be deleted")
    session.delete(course)
    session.commit()
    logger.info("Deleted course id=%s", course_id)
