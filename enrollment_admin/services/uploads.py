import logging
import os
from uuid import uuid4

from fastapi import UploadFile
from werkzeug.utils import secure_filename

from enrollment_admin.config import settings

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"


def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


async def save_upload(file: UploadFile) -> dict:
    """
    Store an uploaded attachment under UPLOADS_DIR.
    Returns {"name": <original filename>, "url": "/uploads/<stored filename>"}.
    """
    original = file.filename or "attachment"
    base = secure_filename(original) or "attachment"
    filename = f"{uuid4().hex[:12]}-{base}"

    _ensure_dir(settings.UPLOADS_DIR)
    path = os.path.join(settings.UPLOADS_DIR, filename)
    contents = await file.read()
    with open(path, "wb") as f:
        f.write(contents)

    logger.info("Stored upload %s (%d bytes) as %s", original, len(contents), filename)
    return {"name": original, "url": f"{UPLOADS_URL_PREFIX}/{filename}"}
