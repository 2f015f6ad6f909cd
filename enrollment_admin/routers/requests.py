from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from enrollment_admin.db import get_session
from enrollment_admin.dependencies import get_notifier, require_admin
from enrollment_admin.models import RequestStatus
from enrollment_admin.schemas.request import (
    ApproveRequest,
    AssignCourse,
    RejectRequest,
    RequestRead,
    RequestResult,
    StatusChange,
)
from enrollment_admin.services import workflow
from enrollment_admin.services.notifications import Notifier

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/", response_model=List[RequestRead])
def list_requests(status: Optional[RequestStatus] = None, session: Session = Depends(get_session)):
    return workflow.list_requests(session, status=status)


@router.get("/{request_id}", response_model=RequestRead)
def get_request(request_id: int, session: Session = Depends(get_session)):
    return workflow.get_request(session, request_id)


@router.post("/{request_id}/approve", response_model=RequestResult)
def approve(
    request_id: int,
    payload: Optional[ApproveRequest] = None,
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    payload = payload or ApproveRequest()
    request = workflow.approve_request(
        session, request_id, comment=payload.comment, expected_version=payload.version, notifier=notifier
    )
    return {"success": True, "request": request}


@router.post("/{request_id}/reject", response_model=RequestResult)
def reject(
    request_id: int,
    payload: Optional[RejectRequest] = None,
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    payload = payload or RejectRequest()
    request = workflow.reject_request(session, request_id, expected_version=payload.version, notifier=notifier)
    return {"success": True, "request": request}


@router.put("/{request_id}/status", response_model=RequestResult)
def change_status(
    request_id: int,
    payload: StatusChange,
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    request = workflow.change_request_status(
        session,
        request_id,
        payload.new_status,
        comment=payload.comment,
        expected_version=payload.version,
        notifier=notifier,
    )
    return {"success": True, "request": request}


@router.put("/{request_id}/assign-course", response_model=RequestResult)
def assign_course(
    request_id: int,
    payload: AssignCourse,
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    request = workflow.reassign_course(
        session,
        request_id,
        payload.new_course_id,
        comment=payload.comment,
        expected_version=payload.version,
        notifier=notifier,
    )
    return {"success": True, "request": request}
