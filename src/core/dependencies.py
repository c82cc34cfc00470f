"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
following Google Python Style Guide and FastAPI best practices.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from config import AUTH_COOKIE_NAME
from core.authorization import Decision, Deny, DenyReason
from core.database import get_db
from core.identity import Identity, resolve_identity
from utils import class_manager
from utils import message_manager
from utils import parent_manager
from utils import relationship_store
from utils import user_manager

# auto_error=False so cookie-only requests still reach get_current_identity
security = HTTPBearer(auto_error=False)

_STATUS_FOR_REASON = {
    DenyReason.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    DenyReason.WRONG_ROLE: status.HTTP_403_FORBIDDEN,
    DenyReason.NOT_OWNER: status.HTTP_403_FORBIDDEN,
    DenyReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    DenyReason.CONFLICT: status.HTTP_400_BAD_REQUEST,
}


def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    """Resolve the caller from the bearer header, falling back to the auth cookie."""
    token = credentials.credentials if credentials else request.cookies.get(AUTH_COOKIE_NAME)
    return resolve_identity(token)


def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """Require a verified identity.

    Raises:
        HTTPException: 401 if the request carries no valid token.
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def enforce(decision: Decision, conceal: Optional[str] = None) -> None:
    """Turn a denial into the matching HTTP error.

    Args:
        decision: Result of ``authorize``.
        conceal: Resource name, e.g. "Class". When given, NOT_FOUND and
            NOT_OWNER both become the same 404 "<conceal> not found or access
            denied", so the caller cannot tell an existing resource they may
            not touch from a missing one.

    Raises:
        HTTPException: For any ``Deny``.
    """
    if not isinstance(decision, Deny):
        return
    if conceal and decision.reason in (DenyReason.NOT_FOUND, DenyReason.NOT_OWNER):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{conceal} not found or access denied",
        )
    raise HTTPException(
        status_code=_STATUS_FOR_REASON[decision.reason], detail=decision.message
    )


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_class_manager(db: Session = Depends(get_db)) -> class_manager.ClassManager:
    """Get ClassManager instance with request-scoped DB session."""
    return class_manager.ClassManager(db)


def get_relationship_store(
    db: Session = Depends(get_db),
) -> relationship_store.RelationshipStore:
    """Get RelationshipStore instance with request-scoped DB session."""
    return relationship_store.RelationshipStore(db)


def get_parent_manager(db: Session = Depends(get_db)) -> parent_manager.ParentManager:
    return parent_manager.ParentManager(db)


def get_message_manager(db: Session = Depends(get_db)) -> message_manager.MessageManager:
    return message_manager.MessageManager(db)


# Type aliases for dependency injection
DBSessionDep = Annotated[Session, Depends(get_db)]
IdentityDep = Annotated[Identity, Depends(get_current_identity)]
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
ClassManagerDep = Annotated[
    class_manager.ClassManager, Depends(get_class_manager)
]
RelationshipStoreDep = Annotated[
    relationship_store.RelationshipStore, Depends(get_relationship_store)
]
ParentManagerDep = Annotated[
    parent_manager.ParentManager, Depends(get_parent_manager)
]
MessageManagerDep = Annotated[
    message_manager.MessageManager, Depends(get_message_manager)
]
