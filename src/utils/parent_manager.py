"""Parent linking and read-only child views."""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session, joinedload

from core.exceptions import UserNotFoundError
from models.class_model import ClassModel
from models.parent_link import ParentLinkModel
from models.student_class import StudentClassModel
from models.user import UserModel
from utils.content_manager import HOMEWORK, QUIZ, ContentManager
from utils.relationship_store import RelationshipStore

logger = logging.getLogger(__name__)


class ParentManager:
    """Manages parent links and what a linked parent can see."""

    def __init__(self, db: Session):
        self.db = db
        self.relationships = RelationshipStore(db)

    def add_child(self, parent_id: str, student_id: str) -> ParentLinkModel:
        """Create an approved link.

        Raises:
            AlreadyLinkedError: If the parent is already linked to the student.
        """
        return self.relationships.create_parent_link(parent_id, student_id)

    def get_student(self, student_id: str) -> UserModel:
        model = (
            self.db.query(UserModel)
            .filter(UserModel.user_id == student_id, UserModel.role == "student")
            .first()
        )
        if model is None:
            raise UserNotFoundError(student_id)
        return model

    def list_student_classes(self, student_id: str) -> List[ClassModel]:
        enrollments = (
            self.db.query(StudentClassModel)
            .options(joinedload(StudentClassModel.class_).joinedload(ClassModel.teacher))
            .filter(StudentClassModel.student_id == student_id)
            .order_by(StudentClassModel.created_at)
            .all()
        )
        return [enrollment.class_ for enrollment in enrollments]

    def list_children(self, parent_id: str) -> List[Tuple[ParentLinkModel, List[ClassModel]]]:
        """Approved links of a parent, each with the child's classes.

        Returns:
            List of (link, classes) tuples; empty when nothing is linked.
        """
        links = (
            self.db.query(ParentLinkModel)
            .options(joinedload(ParentLinkModel.student))
            .filter(
                ParentLinkModel.parent_id == parent_id,
                ParentLinkModel.approved.is_(True),
            )
            .order_by(ParentLinkModel.created_at)
            .all()
        )
        return [(link, self.list_student_classes(link.student_id)) for link in links]

    def child_progress(self, student_id: str) -> dict:
        """Classes, homework and quizzes visible to the child."""
        classes = self.list_student_classes(student_id)
        class_ids = [c.class_id for c in classes]
        return {
            "classes": classes,
            "homework": ContentManager(self.db, HOMEWORK).list_for_classes(class_ids),
            "quizzes": ContentManager(self.db, QUIZ).list_for_classes(class_ids),
        }
