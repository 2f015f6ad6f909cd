import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from enrollment_admin import models  # noqa: F401
from enrollment_admin.db import get_session
from enrollment_admin.dependencies import get_notifier, require_admin
from enrollment_admin.main import app
from enrollment_admin.models import Course, CourseLevel
from enrollment_admin.schemas.request import EnrollmentCreate
from enrollment_admin.services.notifications import Notifier

DATABASE_URL = "sqlite://"
engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent = []

    def send_submission(self, request, course):
        self.sent.append(("submission", request.email, course.id))
        return True

    def send_approval(self, request, course, comment="", reassigned=False):
        self.sent.append(("approval", request.email, course.id, comment, reassigned))
        return True

    def send_rejection(self, request, course):
        self.sent.append(("rejection", request.email, course.id))
        return True

    def kinds(self):
        return [item[0] for item in self.sent]


class FailingNotifier(Notifier):
    def send_submission(self, request, course):
        raise RuntimeError("smtp down")

    def send_approval(self, request, course, comment="", reassigned=False):
        raise RuntimeError("smtp down")

    def send_rejection(self, request, course):
        raise RuntimeError("smtp down")


@pytest.fixture(name="session")
def session_fixture():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="notifier")
def notifier_fixture():
    return RecordingNotifier()


@pytest.fixture(name="make_course")
def make_course_fixture(session: Session):
    def _make_course(title="Spanish I", level=CourseLevel.BEGINNER, **kwargs):
        course = Course(title=title, level=level, term="Fall", year=2026, **kwargs)
        session.add(course)
        session.commit()
        session.refresh(course)
        return course

    return _make_course


@pytest.fixture(name="enrollment_data")
def enrollment_data_fixture():
    def _data(course_id, email="a@x.com", **kwargs):
        values = dict(
            first_name="Ada",
            last_name="Lovelace",
            email=email,
            phone="555-0100",
            age=21,
            comment="",
            course_id=course_id,
            student_level=CourseLevel.BEGINNER,
        )
        values.update(kwargs)
        return EnrollmentCreate(**values)

    return _data


@pytest.fixture(name="client")
def client_fixture(session: Session, notifier: RecordingNotifier):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="admin_client")
def admin_client_fixture(client: AsyncClient):
    app.dependency_overrides[require_admin] = lambda: "admin"
    yield client


@pytest.fixture(name="failing_notifier")
def failing_notifier_fixture():
    return FailingNotifier()


@pytest.fixture(name="other_session")
def other_session_fixture(session: Session):
    """A second connection's view of the same database, as a concurrent admin would have."""
    with Session(engine) as other:
        yield other
