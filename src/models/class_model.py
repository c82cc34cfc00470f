from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    class_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    grade = Column(String, nullable=False)
    class_code = Column(String, unique=True, index=True, nullable=False)
    teacher_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)

    teacher = relationship("UserModel")
    enrollments = relationship(
        "StudentClassModel",
        back_populates="class_",
        cascade="all, delete-orphan",
    )
    lessons = relationship("LessonModel", cascade="all, delete-orphan")
    homework = relationship("HomeworkModel", cascade="all, delete-orphan")
    quizzes = relationship("QuizModel", cascade="all, delete-orphan")
    announcements = relationship("AnnouncementModel", cascade="all, delete-orphan")
