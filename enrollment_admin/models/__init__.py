from .link_models import StudentCourseLink
from .course import Course, Attachment, CourseLevel, CourseStatus
from .student import Student, StudentStatus
from .request import EnrollmentRequest, RequestStatus
from .setting import AppSetting

__all__ = [
    "StudentCourseLink",
    "Course", "Attachment", "CourseLevel", "CourseStatus",
    "Student", "StudentStatus",
    "EnrollmentRequest", "RequestStatus",
    "AppSetting",
]
