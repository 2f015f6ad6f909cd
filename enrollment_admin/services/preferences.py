import logging

from sqlmodel import Session

from enrollment_admin.config import settings
from enrollment_admin.models import AppSetting
from enrollment_admin.models.course import utcnow

logger = logging.getLogger(__name__)

NOTIFICATIONS_KEY = "notifications_enabled"


def notifications_enabled(session: Session) -> bool:
    """Whether approval and submission emails are sent. Rejections ignore this flag."""
    row = session.get(AppSetting, NOTIFICATIONS_KEY)
    if row is None:
        return settings.NOTIFICATIONS_ENABLED_DEFAULT
    return row.value == "true"


def set_notifications_enabled(session: Session, enabled: bool) -> bool:
    row = session.get(AppSetting, NOTIFICATIONS_KEY)
    value = "true" if enabled else "false"
    if row is None:
        row = AppSetting(key=NOTIFICATIONS_KEY, value=value)
    else:
        row.value = value
        row.updated_at = utcnow()
    session.add(row)
    session.commit()
    logger.info("Admin notification preference set to %s", enabled)
    return enabled
