"""Lookup of course shells in the Canvas LMS by SIS course id."""
import logging
from typing import Any, Optional

import httpx

from enrollment_admin.config import settings

logger = logging.getLogger(__name__)


class CanvasError(Exception):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CanvasClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.CANVAS_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.CANVAS_API_TOKEN
        self.timeout = timeout or settings.CANVAS_TIMEOUT_SECONDS
        self.transport = transport

    def get_course_by_sis_id(self, sis_id: str) -> dict[str, Any]:
        if not self.token:
            raise CanvasError("Canvas API token is not configured", status_code=503)

        url = f"{self.base_url}/api/v1/courses/sis_course_id:{sis_id}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, headers={"Authorization": f"Bearer {self.token}"})
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise CanvasError("Timed out contacting Canvas", status_code=504) from exc
        except httpx.HTTPStatusError as exc:
            status_code = 404 if exc.response.status_code == 404 else 502
            logger.warning("Canvas returned %s for SIS id %s", exc.response.status_code, sis_id)
            raise CanvasError("Canvas course not available", status_code=status_code) from exc
        except httpx.HTTPError as exc:
            raise CanvasError("Unable to reach Canvas") from exc

        return response.json()
