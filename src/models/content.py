"""Class-scoped content models.

Lessons, homework, quizzes and announcements all belong to exactly one class
and are removed together with it.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey
from .base import Base


class LessonModel(Base):
    __tablename__ = "lessons"

    lesson_id = Column(String, primary_key=True, index=True)
    class_id = Column(
        String, ForeignKey("classes.class_id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    file_type = Column(String, nullable=False, default="text")  # text | pdf | video
    file_url = Column(String, nullable=True)
    created_at = Column(String, nullable=False)


class HomeworkModel(Base):
    __tablename__ = "homework"

    homework_id = Column(String, primary_key=True, index=True)
    class_id = Column(
        String, ForeignKey("classes.class_id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    deadline = Column(String, nullable=False)  # ISO format string
    created_at = Column(String, nullable=False)


class QuizModel(Base):
    __tablename__ = "quizzes"

    quiz_id = Column(String, primary_key=True, index=True)
    class_id = Column(
        String, ForeignKey("classes.class_id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    time_limit = Column(Integer, nullable=True)  # minutes
    created_at = Column(String, nullable=False)


class AnnouncementModel(Base):
    __tablename__ = "announcements"

    announcement_id = Column(String, primary_key=True, index=True)
    class_id = Column(
        String, ForeignKey("classes.class_id", ondelete="CASCADE"), index=True, nullable=False
    )
    teacher_id = Column(String, ForeignKey("users.user_id"), nullable=False)
    message = Column(Text, nullable=False)
    file_url = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
