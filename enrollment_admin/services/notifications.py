"""
Outbound email notifications for enrollment decisions.

Sending is best effort: the workflow calls a notifier only after its
transaction has committed and logs any failure instead of raising it.
"""
from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from enrollment_admin.config import Settings, settings
from enrollment_admin.models import Course, EnrollmentRequest

logger = logging.getLogger(__name__)

_env = Environment(
    loader=PackageLoader("enrollment_admin", "templates"),
    autoescape=select_autoescape(["html"]),
)


class Notifier:
    """Interface used by the workflow. Each method returns True when a message went out."""

    def send_submission(self, request: EnrollmentRequest, course: Course) -> bool:
        raise NotImplementedError

    def send_approval(
        self, request: EnrollmentRequest, course: Course, comment: str = "", reassigned: bool = False
    ) -> bool:
        raise NotImplementedError

    def send_rejection(self, request: EnrollmentRequest, course: Course) -> bool:
        raise NotImplementedError


def render_email(template_name: str, **context) -> str:
    template = _env.get_template(f"email/{template_name}")
    return template.render(**context)


class EmailNotifier(Notifier):
    """Renders the email templates and delivers them over SMTP with STARTTLS."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings

    def _is_configured(self) -> bool:
        return all([
            self.config.SMTP_SERVER,
            self.config.SMTP_PORT,
            self.config.SMTP_USERNAME,
            self.config.SMTP_PASSWORD,
            self.config.SENDER_EMAIL,
        ])

    def send_email(self, recipient_email: str, subject: str, body: str, html_content: Optional[str] = None) -> bool:
        if not self._is_configured():
            logger.error("Email configuration is incomplete; not sending '%s' to %s", subject, recipient_email)
            return False

        msg = MIMEMultipart("alternative")
        msg["From"] = self.config.SENDER_EMAIL
        msg["To"] = recipient_email
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain"))
        if html_content:
            msg.attach(MIMEText(html_content, "html"))

        try:
            with smtplib.SMTP(self.config.SMTP_SERVER, self.config.SMTP_PORT) as server:
                server.starttls()
                server.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", recipient_email, exc)
            return False

        logger.info("Email '%s' sent to %s", subject, recipient_email)
        return True

    def send_submission(self, request: EnrollmentRequest, course: Course) -> bool:
        html = render_email(
            "submission.html",
            request=request,
            course=course,
            requests_url=f"{self.config.FRONTEND_URL}/admin/requests",
        )
        body = (
            f"New enrollment request from {request.full_name} <{request.email}> "
            f"for {course.title} ({course.level.value}).\n"
            f"Review it at {self.config.FRONTEND_URL}/admin/requests"
        )
        return self.send_email(
            self.config.ADMIN_NOTIFY_EMAIL,
            f"New Enrollment Request: {request.full_name}",
            body,
            html,
        )

    def send_approval(
        self, request: EnrollmentRequest, course: Course, comment: str = "", reassigned: bool = False
    ) -> bool:
        html = render_email("approval.html", request=request, course=course, comment=comment, reassigned=reassigned)
        body = f"Dear {request.first_name},\n\nYour enrollment request for {course.title} has been approved."
        if reassigned:
            body += " You were assigned to a different course."
        if comment:
            body += f"\n\nComment: {comment}"
        return self.send_email(request.email, f"Enrollment Approved: {course.title}", body, html)

    def send_rejection(self, request: EnrollmentRequest, course: Course) -> bool:
        html = render_email("rejection.html", request=request, course=course)
        body = (
            f"Dear {request.first_name},\n\n"
            f"Unfortunately, your enrollment request for {course.title} has been rejected. "
            "You can submit new enrollment requests for other courses."
        )
        return self.send_email(request.email, f"Enrollment Update: {course.title}", body, html)
