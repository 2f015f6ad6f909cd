import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .config import settings
from .db import create_db_and_tables
from .logging_config import setup_logging
from .routers import admin, auth, courses, enrollment, exports, requests, students
from .services.errors import EnrollmentError

logger = logging.getLogger(__name__)


def ensure_storage_dirs() -> None:
    os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    os.makedirs(settings.EXPORTS_DIR, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    ensure_storage_dirs()
    logger.info("Initializing database")
    create_db_and_tables()
    yield


def _error_response(status_code: int, message, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EnrollmentError)
    async def enrollment_error_handler(request: Request, exc: EnrollmentError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, _format_validation_errors(exc))


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        https_only=settings.SESSION_COOKIE_SECURE,
    )

    register_error_handlers(app)

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(courses.router, prefix="/api/courses", tags=["courses"])
    app.include_router(enrollment.router, prefix="/api", tags=["enrollment"])
    app.include_router(requests.router, prefix="/api/requests", tags=["requests"])
    app.include_router(students.router, prefix="/api/students", tags=["students"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(exports.router, prefix="/api/exports", tags=["exports"])

    # Directories are created on startup by the lifespan
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="uploads")
    app.mount("/exports", StaticFiles(directory=settings.EXPORTS_DIR, check_dir=False), name="exports")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
