"""Authentication routes.

This module handles HTTP endpoints for user authentication and registration.
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, Response, status

from config import ACCESS_TOKEN_EXPIRE_MINUTES, AUTH_COOKIE_NAME
from core.dependencies import IdentityDep, UserManagerDep
from core.exceptions import UserAlreadyExistsError, UserNotFoundError
from core.identity import create_access_token
from schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _registration_message(user: User) -> str:
    if user.role == "student":
        return (
            "Student account created successfully. "
            f"Share this parent code with their parent: {user.parent_code}"
        )
    if user.role == "parent":
        return (
            "Parent account created successfully. "
            "You can now add children using their parent codes."
        )
    return "User created successfully"


@router.post("/register", response_model=RegisterResponse, summary="Register a user")
def register(req: RegisterRequest, user_manager: UserManagerDep) -> RegisterResponse:
    """Register a new user.

    Students are given a parent code, returned both in the user record and in
    the message so it can be passed on to a parent.

    Args:
        req: Registration request with name, email, password and role.
        user_manager: Injected UserManager instance.

    Returns:
        RegisterResponse with the created user.

    Raises:
        HTTPException: 400 if the email is already registered.
    """
    try:
        model = user_manager.create_user(
            name=req.name.strip(),
            email=req.email,
            password=req.password,
            role=req.role,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    user = User.model_validate(model)
    return RegisterResponse(message=_registration_message(user), user=user)


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(
    req: LoginRequest,
    response: Response,
    user_manager: UserManagerDep,
) -> LoginResponse:
    """Login with email and password.

    The token is returned in the body and also set as an HTTP-only cookie for
    browser clients.

    Raises:
        HTTPException: 401 if the credentials are wrong.
    """
    model = user_manager.authenticate(req.email, req.password)
    if model is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = create_access_token(
        user_id=model.user_id,
        email=model.email,
        role=model.role,
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info("User %s logged in", model.user_id)
    return LoginResponse(user=User.model_validate(model), token=token)


@router.post("/logout", summary="Log out")
def logout(response: Response) -> dict:
    """Logout endpoint.

    Tokens are stateless, so this only clears the cookie; bearer-token
    clients discard the token themselves.
    """
    response.delete_cookie(AUTH_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    identity: IdentityDep,
    user_manager: UserManagerDep,
) -> CurrentUserResponse:
    """Get current authenticated user information.

    Raises:
        HTTPException: 401 if the account behind a valid token is gone.
    """
    try:
        model = user_manager.get_user_by_id(identity.user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return CurrentUserResponse(user=User.model_validate(model))
