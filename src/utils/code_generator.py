"""Short shareable code generation.

Parent codes (``PARENT-XXXXXX``) identify a student to a parent; class codes
(``CLASS-XXXXXX``) let a student enroll themselves. Candidates are checked
against the database before use. The unique constraints on
``users.parent_code`` and ``classes.class_code`` remain the authoritative
guarantee, since two requests can draw and check the same code concurrently.
"""

import logging
import secrets
import time
from typing import Callable

from sqlalchemy.orm import Session

from config import (
    CLASS_CODE_PREFIX,
    CODE_ALPHABET,
    CODE_LENGTH,
    CODE_MAX_ATTEMPTS,
    PARENT_CODE_PREFIX,
)
from models.class_model import ClassModel
from models.user import UserModel

logger = logging.getLogger(__name__)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def random_code(prefix: str) -> str:
    """Draw ``CODE_LENGTH`` uniform symbols from ``CODE_ALPHABET`` after ``prefix``."""
    return prefix + "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def timestamp_code(prefix: str) -> str:
    """Fallback code from the current time in milliseconds, base-36, uppercased."""
    return prefix + to_base36(int(time.time() * 1000)).upper()


def generate_code(
    prefix: str,
    exists_fn: Callable[[str], bool],
    max_attempts: int = CODE_MAX_ATTEMPTS,
) -> str:
    """Generate a code that ``exists_fn`` reports as unused.

    After ``max_attempts`` collisions the timestamp fallback is returned
    without a further check. This never raises for lack of a free code.

    Args:
        prefix: Code prefix, e.g. "PARENT-".
        exists_fn: Returns True if a candidate is already taken.
        max_attempts: Number of random draws before falling back.

    Returns:
        The generated code.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = random_code(prefix)
        if not exists_fn(candidate):
            return candidate
        logger.warning(
            "Code collision on attempt %d/%d for prefix %s", attempt, max_attempts, prefix
        )

    fallback = timestamp_code(prefix)
    logger.warning(
        "Exhausted %d attempts for prefix %s, using unchecked fallback %s",
        max_attempts,
        prefix,
        fallback,
    )
    return fallback


def parent_code_exists(db: Session, code: str) -> bool:
    return (
        db.query(UserModel.user_id).filter(UserModel.parent_code == code).first()
        is not None
    )


def class_code_exists(db: Session, code: str) -> bool:
    return (
        db.query(ClassModel.class_id).filter(ClassModel.class_code == code).first()
        is not None
    )


def generate_parent_code(db: Session) -> str:
    return generate_code(PARENT_CODE_PREFIX, lambda code: parent_code_exists(db, code))


def generate_class_code(db: Session) -> str:
    return generate_code(CLASS_CODE_PREFIX, lambda code: class_code_exists(db, code))
