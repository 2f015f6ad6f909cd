from sqlmodel import Field, SQLModel


class StudentCourseLink(SQLModel, table=True):
    __tablename__ = "student_courses"
    student_id: int = Field(foreign_key="students.id", primary_key=True)
    course_id: int = Field(foreign_key="courses.id", primary_key=True)
