"""Class-scoped content management.

Lessons, homework, quizzes and announcements share one shape: each row
belongs to one class, is written by the class teacher and read by the teacher
or enrolled students. ``ContentManager`` handles all four kinds.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

import pytz
from sqlalchemy.orm import Session

from core.exceptions import ContentNotFoundError
from models.content import AnnouncementModel, HomeworkModel, LessonModel, QuizModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentKind:
    name: str
    model: Any
    id_column: str
    order_column: str
    newest_first: bool


LESSON = ContentKind("lesson", LessonModel, "lesson_id", "created_at", True)
HOMEWORK = ContentKind("homework", HomeworkModel, "homework_id", "deadline", False)
QUIZ = ContentKind("quiz", QuizModel, "quiz_id", "created_at", True)
ANNOUNCEMENT = ContentKind(
    "announcement", AnnouncementModel, "announcement_id", "created_at", True
)


class ContentManager:
    """Creates and reads content rows of one kind."""

    def __init__(self, db: Session, kind: ContentKind):
        self.db = db
        self.kind = kind

    def create(self, class_id: str, fields: Dict[str, Any]):
        """Insert a content row for ``class_id``.

        Args:
            class_id: Owning class; the caller has already checked ownership.
            fields: Column values other than id, class_id and created_at.

        Returns:
            The created model instance.
        """
        values = dict(fields)
        values[self.kind.id_column] = str(uuid.uuid4())
        values["class_id"] = class_id
        values["created_at"] = datetime.now(pytz.utc).isoformat()
        model = self.kind.model(**values)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info(
            "Created %s %s in class %s",
            self.kind.name,
            values[self.kind.id_column],
            class_id,
        )
        return model

    def get(self, content_id: str):
        """Raises ContentNotFoundError if the row does not exist."""
        model_cls = self.kind.model
        model = (
            self.db.query(model_cls)
            .filter(getattr(model_cls, self.kind.id_column) == content_id)
            .first()
        )
        if model is None:
            raise ContentNotFoundError(self.kind.name, content_id)
        return model

    def list_for_class(self, class_id: str) -> List[Any]:
        return self.list_for_classes([class_id])

    def list_for_classes(self, class_ids: List[str]) -> List[Any]:
        if not class_ids:
            return []
        model_cls = self.kind.model
        order = getattr(model_cls, self.kind.order_column)
        return (
            self.db.query(model_cls)
            .filter(model_cls.class_id.in_(class_ids))
            .order_by(order.desc() if self.kind.newest_first else order.asc())
            .all()
        )
