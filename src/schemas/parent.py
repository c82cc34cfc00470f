"""Parent linking schema definitions."""

from typing import List

from pydantic import BaseModel

from schemas.content import Homework, Quiz
from schemas.user import UserBrief


class AddChildRequest(BaseModel):
    parent_code: str = ""


class AddChildResponse(BaseModel):
    message: str
    child: UserBrief


class ChildClass(BaseModel):
    class_id: str
    name: str
    grade: str
    teacher: str


class Child(BaseModel):
    user_id: str
    name: str
    email: str
    grade: str
    classes: List[ChildClass]
    linked_at: str


class ChildrenResponse(BaseModel):
    children: List[Child]
    parent: UserBrief


class ChildProgress(BaseModel):
    child: UserBrief
    classes: List[ChildClass]
    homework: List[Homework]
    quizzes: List[Quiz]
