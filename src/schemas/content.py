"""Schemas for class-scoped content: lessons, homework, quizzes, announcements."""

from datetime import datetime
from typing import Literal, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateLessonRequest(BaseModel):
    class_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    content: Optional[str] = None
    file_type: Literal["text", "pdf", "video"] = "text"
    file_url: Optional[str] = None


class Lesson(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lesson_id: str
    class_id: str
    title: str
    content: Optional[str] = None
    file_type: str
    file_url: Optional[str] = None
    created_at: str


class CreateHomeworkRequest(BaseModel):
    class_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    deadline: str = Field(min_length=1)

    @field_validator("deadline")
    @classmethod
    def check_deadline(cls, value: str) -> str:
        """Parse an ISO 8601 deadline and store it in UTC.

        Stored deadlines are compared as strings, so they share one offset.
        A deadline without an offset is taken as UTC.
        """
        # Accept a trailing "Z" as browsers send it
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Deadline must be an ISO 8601 date or datetime")
        if parsed.tzinfo is None:
            parsed = pytz.utc.localize(parsed)
        return parsed.astimezone(pytz.utc).isoformat()


class Homework(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    homework_id: str
    class_id: str
    title: str
    description: str
    deadline: str
    created_at: str


class CreateQuizRequest(BaseModel):
    class_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    time_limit: Optional[int] = Field(default=None, ge=1)


class Quiz(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    quiz_id: str
    class_id: str
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    created_at: str


class CreateAnnouncementRequest(BaseModel):
    class_id: str = Field(min_length=1)
    message: str
    file_url: Optional[str] = None

    @field_validator("message")
    @classmethod
    def check_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Announcement message is required")
        return value


class Announcement(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    announcement_id: str
    class_id: str
    teacher_id: str
    message: str
    file_url: Optional[str] = None
    created_at: str
