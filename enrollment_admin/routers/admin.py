from fastapi import APIRouter, Depends
from sqlmodel import Session

from enrollment_admin.db import get_session
from enrollment_admin.dependencies import require_admin
from enrollment_admin.schemas.admin import DashboardStats, NotificationPreference
from enrollment_admin.services.dashboard import dashboard_stats
from enrollment_admin.services.preferences import notifications_enabled, set_notifications_enabled

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/notifications", response_model=NotificationPreference)
async def get_notification_preference(session: Session = Depends(get_session)):
    return {"enabled": notifications_enabled(session)}


@router.post("/notifications")
async def set_notification_preference(payload: NotificationPreference, session: Session = Depends(get_session)):
    enabled = set_notifications_enabled(session, payload.enabled)
    return {"success": True, "enabled": enabled}


@router.get("/stats", response_model=DashboardStats)
async def stats(session: Session = Depends(get_session)):
    return dashboard_stats(session)
