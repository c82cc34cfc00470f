"""User schema definitions."""

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import NAME_MIN_LENGTH, PASSWORD_MIN_LENGTH

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

Role = Literal["teacher", "student", "parent"]


class User(BaseModel):
    """Public view of a user account. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    email: str
    role: Role
    parent_code: Optional[str] = None
    created_at: str


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    email: str


class RegisterRequest(BaseModel):
    name: str = Field(min_length=NAME_MIN_LENGTH)
    email: str
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    role: Role

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not _EMAIL_RE.match(value):
            raise ValueError("Invalid email address")
        return value


class RegisterResponse(BaseModel):
    message: str
    user: User


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginResponse(BaseModel):
    user: User
    token: str


class CurrentUserResponse(BaseModel):
    user: User
