from fastapi import HTTPException, Request, status

from .config import settings
from .services.canvas import CanvasClient
from .services.notifications import EmailNotifier, Notifier


def get_notifier() -> Notifier:
    """Dependency providing the notification gateway."""
    return EmailNotifier(settings)


def get_canvas_client() -> CanvasClient:
    return CanvasClient()


def require_admin(request: Request) -> str:
    """Dependency that ensures the admin has logged in during this session."""
    username = request.session.get("admin")
    if not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin login required")
    return username
