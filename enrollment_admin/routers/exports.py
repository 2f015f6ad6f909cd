from typing import Literal

from fastapi import APIRouter, Depends
from sqlmodel import Session

from enrollment_admin.db import get_session
from enrollment_admin.dependencies import require_admin
from enrollment_admin.schemas.admin import ExportResult
from enrollment_admin.services.exports import EXPORTERS

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/{collection}", response_model=ExportResult)
async def export_collection(
    collection: Literal["students", "courses", "enrollments"],
    session: Session = Depends(get_session),
):
    return {"success": True, "file": EXPORTERS[collection](session)}
