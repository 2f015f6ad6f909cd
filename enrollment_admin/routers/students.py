from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from enrollment_admin.db import get_session
from enrollment_admin.dependencies import require_admin
from enrollment_admin.models import CourseLevel, StudentStatus
from enrollment_admin.schemas.student import StudentRead
from enrollment_admin.services import students as student_service

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/", response_model=List[StudentRead])
async def list_students(
    status: Optional[StudentStatus] = None,
    level: Optional[CourseLevel] = None,
    q: str = "",
    session: Session = Depends(get_session),
):
    return student_service.list_students(session, status=status, level=level, q=q)


@router.get("/{student_id}", response_model=StudentRead)
async def get_student(student_id: int, session: Session = Depends(get_session)):
    return student_service.get_student(session, student_id)
