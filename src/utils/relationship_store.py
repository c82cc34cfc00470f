"""Relationship store access.

Thin reads and writes over the three relationships that authorization depends
on: class ownership (``classes.teacher_id``), enrollment (``student_classes``)
and parent linkage (``parent_links``).
"""

import logging
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.authorization import ResourceFacts
from core.exceptions import AlreadyEnrolledError, AlreadyLinkedError
from models.class_model import ClassModel
from models.parent_link import ParentLinkModel
from models.student_class import StudentClassModel
from models.user import UserModel

logger = logging.getLogger(__name__)


class RelationshipStore:
    """Reads and writes class ownership, enrollment and parent links."""

    def __init__(self, db: Session):
        """Initialize RelationshipStore.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def class_exists(self, class_id: str) -> bool:
        return (
            self.db.query(ClassModel.class_id)
            .filter(ClassModel.class_id == class_id)
            .first()
            is not None
        )

    def user_exists(self, user_id: str) -> bool:
        return (
            self.db.query(UserModel.user_id)
            .filter(UserModel.user_id == user_id)
            .first()
            is not None
        )

    def is_teacher_of_class(self, user_id: str, class_id: str) -> bool:
        return (
            self.db.query(ClassModel.class_id)
            .filter(ClassModel.class_id == class_id, ClassModel.teacher_id == user_id)
            .first()
            is not None
        )

    def is_enrolled_in_class(self, user_id: str, class_id: str) -> bool:
        return (
            self.db.query(StudentClassModel.id)
            .filter(
                StudentClassModel.student_id == user_id,
                StudentClassModel.class_id == class_id,
            )
            .first()
            is not None
        )

    def is_linked_parent_of(self, parent_id: str, student_id: str) -> bool:
        """True only for an approved link."""
        return (
            self.db.query(ParentLinkModel.id)
            .filter(
                ParentLinkModel.parent_id == parent_id,
                ParentLinkModel.student_id == student_id,
                ParentLinkModel.approved.is_(True),
            )
            .first()
            is not None
        )

    def has_parent_link(self, parent_id: str, student_id: str) -> bool:
        """True for any link, approved or not."""
        return (
            self.db.query(ParentLinkModel.id)
            .filter(
                ParentLinkModel.parent_id == parent_id,
                ParentLinkModel.student_id == student_id,
            )
            .first()
            is not None
        )

    def find_class_by_code(self, class_code: str) -> Optional[ClassModel]:
        """Look up a class by code; codes are matched case-insensitively."""
        return (
            self.db.query(ClassModel)
            .filter(ClassModel.class_code == class_code.strip().upper())
            .first()
        )

    def find_student_by_parent_code(self, parent_code: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(
                UserModel.parent_code == parent_code.strip().upper(),
                UserModel.role == "student",
            )
            .first()
        )

    def create_enrollment(self, student_id: str, class_id: str) -> StudentClassModel:
        """Enroll a student in a class.

        Raises:
            AlreadyEnrolledError: If the pair already exists, whether found by
                the pre-check or by the unique constraint.
        """
        if self.is_enrolled_in_class(student_id, class_id):
            raise AlreadyEnrolledError(student_id, class_id)

        enrollment = StudentClassModel(
            student_id=student_id,
            class_id=class_id,
            created_at=datetime.now(pytz.utc).isoformat(),
        )
        try:
            self.db.add(enrollment)
            self.db.commit()
        except IntegrityError as e:
            # A concurrent join of the same pair won the race
            self.db.rollback()
            raise AlreadyEnrolledError(student_id, class_id) from e
        self.db.refresh(enrollment)
        logger.info("Enrolled student %s in class %s", student_id, class_id)
        return enrollment

    def create_parent_link(self, parent_id: str, student_id: str) -> ParentLinkModel:
        """Link a parent to a student. Links are approved at creation.

        Raises:
            AlreadyLinkedError: If the pair already exists.
        """
        if self.has_parent_link(parent_id, student_id):
            raise AlreadyLinkedError(parent_id, student_id)

        link = ParentLinkModel(
            parent_id=parent_id,
            student_id=student_id,
            approved=True,
            created_at=datetime.now(pytz.utc).isoformat(),
        )
        try:
            self.db.add(link)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise AlreadyLinkedError(parent_id, student_id) from e
        self.db.refresh(link)
        logger.info("Linked parent %s to student %s", parent_id, student_id)
        return link

    def clear_parent_links(self) -> int:
        """Delete every parent link. Maintenance only.

        Returns:
            Number of deleted links.
        """
        count = self.db.query(ParentLinkModel).delete()
        self.db.commit()
        logger.info("Deleted %d parent links", count)
        return count

    def class_facts(self, user_id: str, class_id: str) -> ResourceFacts:
        """Facts about a class as seen by ``user_id``."""
        if not self.class_exists(class_id):
            return ResourceFacts(exists=False)
        return ResourceFacts(
            exists=True,
            is_owner=self.is_teacher_of_class(user_id, class_id),
            is_enrolled=self.is_enrolled_in_class(user_id, class_id),
        )

    def student_facts(self, parent_id: str, student_id: str) -> ResourceFacts:
        """Facts about a student as seen by a parent."""
        student_exists = (
            self.db.query(UserModel.user_id)
            .filter(UserModel.user_id == student_id, UserModel.role == "student")
            .first()
            is not None
        )
        return ResourceFacts(
            exists=student_exists,
            is_linked=student_exists and self.is_linked_parent_of(parent_id, student_id),
        )
