"""Class and enrollment schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.user import UserBrief


class CreateClassRequest(BaseModel):
    name: str = Field(min_length=1)
    grade: str = Field(min_length=1)


class UpdateClassRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    grade: Optional[str] = Field(default=None, min_length=1)


class JoinClassRequest(BaseModel):
    class_code: str = ""


class ContentCounts(BaseModel):
    lessons: int = 0
    homework: int = 0
    quizzes: int = 0
    announcements: int = 0


class ClassInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    class_id: str
    name: str
    grade: str
    class_code: str
    teacher_id: str
    created_at: str
    updated_at: str


class ClassSummary(ClassInfo):
    """Class listing entry with teacher and content counts."""

    teacher: Optional[UserBrief] = None
    student_count: int = 0
    counts: ContentCounts = ContentCounts()


class ClassResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    class_: ClassInfo = Field(alias="class")


class RosterEntry(BaseModel):
    student_id: str
    name: str
    email: str
    parent_code: Optional[str] = None
    joined_at: str


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    class_: ClassSummary = Field(alias="class")
    joined_at: str


class ClassListResponse(BaseModel):
    classes: List[ClassSummary]
