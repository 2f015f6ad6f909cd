from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Course Enrollment Admin"
    SECRET_KEY: str = "dev-secret-key-change-me"
    DATABASE_URL: str = "sqlite:///enrollment.db"
    SQL_ECHO: bool = False

    # Hard-coded admin credentials, checked on /auth/login
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-me"
    SESSION_COOKIE_SECURE: bool = False

    SMTP_SERVER: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SENDER_EMAIL: str = "no-reply@example.com"
    ADMIN_NOTIFY_EMAIL: str = "admissions@example.com"
    FRONTEND_URL: str = "http://localhost:8080"
    NOTIFICATIONS_ENABLED_DEFAULT: bool = True

    UPLOADS_DIR: str = "uploads"
    EXPORTS_DIR: str = "exports"

    CANVAS_BASE_URL: str = "https://canvas.instructure.com"
    CANVAS_API_TOKEN: Optional[str] = None
    CANVAS_TIMEOUT_SECONDS: float = 10.0

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None


settings = Settings()
