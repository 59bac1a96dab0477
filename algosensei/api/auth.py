"""
Authentication API endpoints
User registration and credential-based sessions
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response, status

from algosensei.api.deps import get_current_user, get_user_repository
from algosensei.config import settings
from algosensei.core.security import create_session_token
from algosensei.middleware.rate_limiter import auth_rate_limit
from algosensei.schemas.auth import (
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    UserResponse,
)
from algosensei.services.user_repository import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@auth_rate_limit()
async def register(
    request: Request,
    body: RegisterRequest,
    users: UserRepository = Depends(get_user_repository)
):
    """
    Register a new user

    Returns:
        RegisterResponse: Success message

    Raises:
        400 if the email is already registered or fields are missing
    """
    users.register(username=body.username, email=body.email, password=body.password)
    return RegisterResponse()


@router.post("/login", response_model=SessionResponse)
@auth_rate_limit()
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    users: UserRepository = Depends(get_user_repository)
):
    """
    Exchange email and password for a session credential

    The credential is returned in the body (for Bearer use) and set as an
    HTTP-only cookie (for the browser).

    Raises:
        401 on unknown email or wrong password
    """
    user = users.authenticate(body.email, body.password)
    token = create_session_token(user["email"])

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info(f"User {user['id']} logged in")

    return SessionResponse(access_token=token, user=UserRepository.to_response(user))


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response):
    """Clear the session cookie"""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return LogoutResponse()


@router.get("/me", response_model=UserResponse)
async def me(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Public profile of the authenticated user"""
    return UserRepository.to_response(current_user)
