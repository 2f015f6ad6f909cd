import smtplib

import pytest

from enrollment_admin.config import Settings
from enrollment_admin.models import Course, CourseLevel, EnrollmentRequest
from enrollment_admin.services import notifications
from enrollment_admin.services.notifications import EmailNotifier, render_email


class FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def send_message(self, msg):
        FakeSMTP.sent.append(msg)


class BrokenSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPServerDisconnected("connection lost")


@pytest.fixture(name="smtp_settings")
def smtp_settings_fixture():
    return Settings(
        SMTP_SERVER="smtp.example.com",
        SMTP_USERNAME="mailer",
        SMTP_PASSWORD="secret",
        SENDER_EMAIL="courses@example.com",
        ADMIN_NOTIFY_EMAIL="office@example.com",
        FRONTEND_URL="https://admin.example.com",
    )


@pytest.fixture(name="fake_smtp")
def fake_smtp_fixture(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _course():
    return Course(id=3, title="Spanish I", level=CourseLevel.BEGINNER, term="Fall", year=2026, location="Room 4")


def _request():
    return EnrollmentRequest(
        id=9, first_name="Ada", last_name="Lovelace", email="a@x.com", phone="555-0100",
        age=21, comment="<script>alert(1)</script>", course_id=3, student_level=CourseLevel.BEGINNER,
    )


def test_render_approval_with_comment():
    html = render_email("approval.html", request=_request(), course=_course(), comment="See you Monday", reassigned=True)
    assert "Spanish I" in html
    assert "See you Monday" in html
    assert "assigned to a different course" in html
    assert "Room 4" in html


def test_render_escapes_user_input():
    html = render_email("submission.html", request=_request(), course=_course(), requests_url="/admin/requests")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_send_skipped_without_configuration(fake_smtp):
    notifier = EmailNotifier(Settings(SMTP_SERVER="", SMTP_USERNAME="", SMTP_PASSWORD=""))
    assert notifier.send_rejection(_request(), _course()) is False
    assert fake_smtp.sent == []


def test_send_approval(smtp_settings, fake_smtp):
    notifier = EmailNotifier(smtp_settings)

    assert notifier.send_approval(_request(), _course(), comment="Welcome") is True

    msg = fake_smtp.sent[0]
    assert msg["To"] == "a@x.com"
    assert msg["From"] == "courses@example.com"
    assert msg["Subject"] == "Enrollment Approved: Spanish I"


def test_submission_goes_to_admin(smtp_settings, fake_smtp):
    notifier = EmailNotifier(smtp_settings)

    assert notifier.send_submission(_request(), _course()) is True

    msg = fake_smtp.sent[0]
    assert msg["To"] == "office@example.com"
    assert msg["Subject"] == "New Enrollment Request: Ada Lovelace"
    html = msg.get_payload()[1].get_payload(decode=True).decode()
    assert "https://admin.example.com/admin/requests" in html


def test_smtp_failure_returns_false(smtp_settings, monkeypatch):
    monkeypatch.setattr(notifications.smtplib, "SMTP", BrokenSMTP)
    notifier = EmailNotifier(smtp_settings)
    assert notifier.send_rejection(_request(), _course()) is False
