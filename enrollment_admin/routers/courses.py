from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlmodel import Session

from enrollment_admin.db import get_session
from enrollment_admin.dependencies import get_canvas_client, require_admin
from enrollment_admin.models import CourseLevel, CourseStatus
from enrollment_admin.schemas.course import AttachmentIn, CourseForm, CourseRead
from enrollment_admin.services import courses as course_service
from enrollment_admin.services.canvas import CanvasClient, CanvasError
from enrollment_admin.services.uploads import save_upload

router = APIRouter()


async def _collect_attachments(files: Optional[List[UploadFile]], attachments: Optional[str]):
    # Validate the JSON first so a bad payload stores no files
    existing = course_service.parse_attachments(attachments)
    uploaded = []
    for file in files or []:
        if file.filename:
            uploaded.append(await save_upload(file))
    return [AttachmentIn(**item) for item in uploaded] + existing


@router.get("/", response_model=List[CourseRead])
async def list_courses(
    status: Optional[CourseStatus] = None,
    level: Optional[CourseLevel] = None,
    session: Session = Depends(get_session),
):
    return course_service.list_courses(session, status=status, level=level)


@router.get("/canvas/{sis_id}")
def fetch_canvas_course(sis_id: str, client: CanvasClient = Depends(get_canvas_client)):
    try:
        return client.get_course_by_sis_id(sis_id)
    except CanvasError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(course_id: int, session: Session = Depends(get_session)):
    return course_service.get_course(session, course_id)


@router.post("/", response_model=CourseRead, status_code=201)
async def create_course(
    form: CourseForm = Depends(CourseForm.as_form),
    files: Optional[List[UploadFile]] = File(None),
    attachments: Optional[str] = Form(None),
    admin: str = Depends(require_admin),
    session: Session = Depends(get_session),
):
    items = await _collect_attachments(files, attachments)
    return course_service.create_course(session, form, items)


@router.put("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: int,
    form: CourseForm = Depends(CourseForm.as_form),
    files: Optional[List[UploadFile]] = File(None),
    attachments: Optional[str] = Form(None),
    admin: str = Depends(require_admin),
    session: Session = Depends(get_session),
):
    course_service.get_course(session, course_id)
    items = await _collect_attachments(files, attachments)
    return course_service.update_course(session, course_id, form, items)


@router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    admin: str = Depends(require_admin),
    session: Session = Depends(get_session),
):
    course_service.delete_course(session, course_id)
    return {"success": True}
