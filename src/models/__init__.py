from .base import Base
from .user import UserModel
from .class_model import ClassModel
from .student_class import StudentClassModel
from .parent_link import ParentLinkModel
from .content import AnnouncementModel, HomeworkModel, LessonModel, QuizModel
from .message import MessageModel

__all__ = [
    "Base",
    "UserModel",
    "ClassModel",
    "StudentClassModel",
    "ParentLinkModel",
    "LessonModel",
    "HomeworkModel",
    "QuizModel",
    "AnnouncementModel",
    "MessageModel",
]
