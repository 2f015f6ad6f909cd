from typing import Dict
from pydantic import BaseModel, StrictBool


class NotificationPreference(BaseModel):
    enabled: StrictBool


class DashboardStats(BaseModel):
    total_students: int
    active_students: int
    total_courses: int
    open_courses: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    total_waitlist: int
    courses_by_level: Dict[str, int]


class ExportResult(BaseModel):
    success: bool = True
    file: str
