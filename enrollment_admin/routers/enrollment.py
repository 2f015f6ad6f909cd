from fastapi import APIRouter, Depends
from sqlmodel import Session

from enrollment_admin.db import get_session
from enrollment_admin.dependencies import get_notifier
from enrollment_admin.schemas.request import CheckEnrollment, EnrollmentCreate, RequestRead
from enrollment_admin.services import workflow
from enrollment_admin.services.notifications import Notifier

router = APIRouter()


@router.post("/enroll", response_model=RequestRead, status_code=201)
def enroll(
    payload: EnrollmentCreate,
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    return workflow.submit_request(session, payload, notifier=notifier)


@router.post("/check-enrollment")
def check_enrollment(payload: CheckEnrollment, session: Session = Depends(get_session)):
    return {"enrolled": workflow.check_enrollment(session, payload.email, payload.course_id)}
