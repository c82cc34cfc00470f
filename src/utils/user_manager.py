"""User management utilities.

This module provides user management functionality including registration,
password hashing, parent code assignment, and credential checks.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

import bcrypt
import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, CODE_INSERT_RETRIES
from core.exceptions import UserAlreadyExistsError, UserNotFoundError
from models.user import UserModel
from utils.code_generator import generate_parent_code

logger = logging.getLogger(__name__)


def _is_parent_code_violation(error: IntegrityError) -> bool:
    return "parent_code" in str(error.orig).lower()


def _is_email_violation(error: IntegrityError) -> bool:
    return "email" in str(error.orig).lower()


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    @staticmethod
    def _password_bytes(password: str) -> bytes:
        # bcrypt only looks at the first 72 bytes
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > 72:
            logger.warning("Password exceeds 72 bytes, truncating")
            password_bytes = password_bytes[:72]
        return password_bytes

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(self._password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                self._password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_user(self, name: str, email: str, password: str, role: str) -> UserModel:
        """Create a new user.

        Students receive a parent code in the same insert. If the database
        rejects the code as a duplicate, a new one is drawn and the insert
        retried.

        Args:
            name: Display name.
            email: Email address, unique across users.
            password: Plain text password.
            role: 'teacher', 'student', or 'parent'.

        Returns:
            The created UserModel.

        Raises:
            UserAlreadyExistsError: If the email is already registered.
        """
        if self.get_user_by_email(email) is not None:
            raise UserAlreadyExistsError("User with this email already exists")

        password_hash = self.hash_password(password)

        for attempt in range(CODE_INSERT_RETRIES + 1):
            model = UserModel(
                user_id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                parent_code=generate_parent_code(self.db) if role == "student" else None,
                created_at=datetime.now(pytz.utc).isoformat(),
            )
            try:
                self.db.add(model)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if _is_parent_code_violation(e) and attempt < CODE_INSERT_RETRIES:
                    logger.warning("Parent code %s taken on insert, retrying", model.parent_code)
                    continue
                # Handle race condition: both requests passed the email check
                if _is_email_violation(e):
                    raise UserAlreadyExistsError("User with this email already exists") from e
                raise
            self.db.refresh(model)
            logger.info("Created %s account %s", role, model.user_id)
            return model

    def authenticate(self, email: str, password: str) -> Optional[UserModel]:
        """Return the user for valid credentials, None otherwise."""
        model = self.get_user_by_email(email)
        if model is None:
            return None
        if not self.verify_password(password, model.password_hash):
            return None
        return model

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.email == email).first()

    def get_user_by_id(self, user_id: str) -> UserModel:
        """Get a user by user ID.

        Raises:
            UserNotFoundError: If no user has this ID.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model is None:
            raise UserNotFoundError(user_id)
        return model

    def list_students_without_parent_code(self) -> List[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.role == "student", UserModel.parent_code.is_(None))
            .all()
        )

    def backfill_parent_codes(self) -> Tuple[int, int]:
        """Assign parent codes to students created before codes existed.

        Each student is committed separately so one failure does not undo
        the others. A code rejected by the unique constraint is replaced and
        the update retried, as in ``create_user``.

        Returns:
            Tuple of (updated count, failed count).
        """
        students = self.list_students_without_parent_code()
        logger.info("Found %d students without parent codes", len(students))

        updated = 0
        failed = 0
        for student in students:
            user_id = student.user_id
            for attempt in range(CODE_INSERT_RETRIES + 1):
                student.parent_code = generate_parent_code(self.db)
                try:
                    self.db.commit()
                except IntegrityError as e:
                    self.db.rollback()
                    if _is_parent_code_violation(e) and attempt < CODE_INSERT_RETRIES:
                        logger.warning("Parent code taken for student %s, retrying", user_id)
                        continue
                    failed += 1
                    logger.exception("Failed to assign parent code to student %s", user_id)
                    break
                updated += 1
                logger.info("Assigned parent code %s to student %s", student.parent_code, user_id)
                break

        logger.info("Backfill finished: %d updated, %d failed", updated, failed)
        return updated, failed
