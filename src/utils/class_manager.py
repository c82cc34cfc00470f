"""Class management utilities."""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from config import CODE_INSERT_RETRIES
from core.exceptions import ClassNotFoundError
from models.class_model import ClassModel
from models.content import AnnouncementModel, HomeworkModel, LessonModel, QuizModel
from models.student_class import StudentClassModel
from models.user import UserModel
from utils.code_generator import generate_class_code
from utils.relationship_store import RelationshipStore

logger = logging.getLogger(__name__)

# Child tables removed together with their class
_CLASS_SCOPED_MODELS = (
    LessonModel,
    HomeworkModel,
    QuizModel,
    AnnouncementModel,
    StudentClassModel,
)


class ClassManager:
    """Manages classes, enrollment, and rosters."""

    def __init__(self, db: Session):
        self.db = db
        self.relationships = RelationshipStore(db)

    def create_class(self, name: str, grade: str, teacher_id: str) -> ClassModel:
        """Create a class with a freshly generated class code.

        A class code rejected by the unique constraint counts as a collision:
        the insert is retried with a new code.
        """
        for attempt in range(CODE_INSERT_RETRIES + 1):
            now = datetime.now(pytz.utc).isoformat()
            class_model = ClassModel(
                class_id=str(uuid.uuid4()),
                name=name,
                grade=grade,
                class_code=generate_class_code(self.db),
                teacher_id=teacher_id,
                created_at=now,
                updated_at=now,
            )
            try:
                self.db.add(class_model)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                if attempt < CODE_INSERT_RETRIES:
                    logger.warning(
                        "Class code %s taken on insert, retrying", class_model.class_code
                    )
                    continue
                raise
            self.db.refresh(class_model)
            logger.info(
                "Created class %s (%s) for teacher %s",
                class_model.class_id,
                class_model.class_code,
                teacher_id,
            )
            return class_model

    def get_class(self, class_id: str) -> ClassModel:
        model = (
            self.db.query(ClassModel)
            .options(joinedload(ClassModel.teacher))
            .filter(ClassModel.class_id == class_id)
            .first()
        )
        if not model:
            raise ClassNotFoundError(class_id)
        return model

    def list_classes_for_teacher(self, teacher_id: str) -> List[ClassModel]:
        return (
            self.db.query(ClassModel)
            .options(joinedload(ClassModel.teacher))
            .filter(ClassModel.teacher_id == teacher_id)
            .order_by(ClassModel.created_at.desc())
            .all()
        )

    def list_enrollments_for_student(self, student_id: str) -> List[StudentClassModel]:
        return (
            self.db.query(StudentClassModel)
            .options(joinedload(StudentClassModel.class_).joinedload(ClassModel.teacher))
            .filter(StudentClassModel.student_id == student_id)
            .order_by(StudentClassModel.created_at.desc())
            .all()
        )

    def count_content(self, class_id: str) -> Dict[str, int]:
        """Count lessons, homework, quizzes and announcements of a class."""
        counts = {}
        for key, model in (
            ("lessons", LessonModel),
            ("homework", HomeworkModel),
            ("quizzes", QuizModel),
            ("announcements", AnnouncementModel),
        ):
            counts[key] = (
                self.db.query(func.count())
                .select_from(model)
                .filter(model.class_id == class_id)
                .scalar()
            )
        return counts

    def count_students(self, class_id: str) -> int:
        return (
            self.db.query(func.count(StudentClassModel.id))
            .filter(StudentClassModel.class_id == class_id)
            .scalar()
        )

    def update_class(
        self, class_id: str, name: Optional[str] = None, grade: Optional[str] = None
    ) -> ClassModel:
        """Update name and/or grade. The class code never changes."""
        model = self.get_class(class_id)
        if name is not None:
            model.name = name.strip()
        if grade is not None:
            model.grade = grade.strip()
        model.updated_at = datetime.now(pytz.utc).isoformat()
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated class %s", class_id)
        return model

    def list_roster(self, class_id: str) -> List[dict]:
        query = (
            self.db.query(StudentClassModel, UserModel)
            .join(UserModel, UserModel.user_id == StudentClassModel.student_id)
            .filter(StudentClassModel.class_id == class_id)
            .order_by(StudentClassModel.created_at)
        )
        return [
            {
                "student_id": user.user_id,
                "name": user.name,
                "email": user.email,
                "parent_code": user.parent_code,
                "joined_at": enrollment.created_at,
            }
            for enrollment, user in query.all()
        ]

    def join_class(self, class_id: str, student_id: str) -> StudentClassModel:
        """Enroll a student.

        Raises:
            AlreadyEnrolledError: If the student is already enrolled.
        """
        return self.relationships.create_enrollment(student_id, class_id)

    def delete_class(self, class_id: str) -> None:
        """Delete a class and everything scoped to it in one transaction.

        Ownership is checked by the caller before this is reached.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_model = self.get_class(class_id)
        try:
            for model in _CLASS_SCOPED_MODELS:
                self.db.query(model).filter(model.class_id == class_id).delete(
                    synchronize_session=False
                )
            self.db.delete(class_model)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete class %s, rolled back", class_id)
            raise
        logger.info("Deleted class: %s", class_id)
