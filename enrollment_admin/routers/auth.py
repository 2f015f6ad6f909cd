import logging
import secrets

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status

from enrollment_admin.config import settings
from enrollment_admin.dependencies import require_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def _credentials_match(username: str, password: str) -> bool:
    user_ok = secrets.compare_digest(username.encode(), settings.ADMIN_USERNAME.encode())
    pass_ok = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    return user_ok and pass_ok


@router.post("/login")
async def login(request: Request, username: str = Form(...), password: str = Form(...)):
    if not _credentials_match(username, password):
        logger.warning("Failed admin login for %r", username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")
    request.session["admin"] = username
    return {"success": True, "username": username}


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.get("/me")
async def me(username: str = Depends(require_admin)):
    return {"username": username}
