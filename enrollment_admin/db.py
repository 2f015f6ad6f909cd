import os

from sqlmodel import Session, SQLModel, create_engine

from .config import settings


def _database_url(url: str) -> str:
    # Anchor relative sqlite paths to the working directory
    if url.startswith("sqlite:///") and not url.startswith("sqlite:////") and ":memory:" not in url:
        db_path = os.path.abspath(os.path.join(os.getcwd(), url.split("///")[-1]))
        return f"sqlite:///{db_path}"
    return url


DATABASE_URL = _database_url(settings.DATABASE_URL)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)


def create_db_and_tables() -> None:
    # Import so every table is registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
