"""Identity claims.

Issues and verifies the signed JWT that every authenticated request carries.
The claim holds the user id, email and role as of login; the role is not
re-read from the database on each request.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

from config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
    USER_ROLES,
)

logger = logging.getLogger(__name__)


class Identity(BaseModel):
    """The caller as asserted by a verified token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    role: str


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token.

    Args:
        user_id: Subject of the token.
        email: Email of the user at issuance.
        role: Role of the user at issuance.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": user_id,
        "email": email,
        "role": role,
        "exp": datetime.now(pytz.utc) + expires_delta,
    }
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def resolve_identity(token: Optional[str]) -> Optional[Identity]:
    """Verify a token and return the identity it carries.

    Any verification failure (missing, malformed, expired, bad signature,
    incomplete claims, unknown role) yields None.

    Args:
        token: Raw bearer token, or None.

    Returns:
        Identity if the token is valid, None otherwise.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug("Rejected access token: %s", e)
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    claims = (user_id, email, role)
    if not all(isinstance(claim, str) and claim for claim in claims) or role not in USER_ROLES:
        logger.debug("Rejected access token with incomplete claims")
        return None
    return Identity(user_id=user_id, email=email, role=role)
