"""Signup/signin/signout and the auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storyrelay.core.config import settings
from storyrelay.core.database import get_db
from storyrelay.core.security import (
    BEARER_PREFIX,
    issue_access_token,
    parse_bearer,
    verify_access_token,
    verify_password,
)
from storyrelay.models.user import User
from storyrelay.schemas.auth import (
    CurrentUser,
    MessageResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserListItem,
    UsersListResponse,
)
from storyrelay.services.ownership import is_admin
from storyrelay.services.registration import RegistrationError, register_user

logger = logging.getLogger(__name__)
router = APIRouter()
auth_cookie = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)

LOGIN_REQUIRED = "Login required."


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=LOGIN_REQUIRED,
    )


def get_current_user(
    cookie: Annotated[str | None, Depends(auth_cookie)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: resolve the caller from the 'authorization' cookie ('Bearer <token>').

    Missing cookie, wrong prefix, invalid token and unknown user all produce
    the same 401 so the client cannot tell which check failed.
    """
    token = parse_bearer(cookie)
    if token is None:
        logger.debug("Auth rejected: missing cookie or bearer prefix")
        raise _unauthorized()
    user_id = verify_access_token(token)
    if user_id is None:
        logger.debug("Auth rejected: invalid token")
        raise _unauthorized()
    try:
        user = db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Auth lookup failed for user_id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The request could not be processed.",
        ) from e
    if user is None:
        logger.debug("Auth rejected: user_id=%s not found", user_id)
        raise _unauthorized()
    return CurrentUser(id=user.id, nickname=user.nickname, role=user.role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required.",
        )
    return current_user


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """
    Register a new account.

    Returns 412 when the nickname or password breaks the format rules, when the
    password contains the nickname, or when the nickname is taken.
    """
    try:
        register_user(db, body.nickname, body.password)
    except RegistrationError as e:
        raise HTTPException(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            detail=e.message,
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Signup failed for nickname=%s", body.nickname)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The request could not be processed.",
        ) from e
    return MessageResponse(message="Signup succeeded.")


@router.post("/signin", response_model=TokenResponse)
def signin(
    body: SigninRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with nickname and password.

    On success the token is returned in the body and stored in the
    'authorization' cookie as 'Bearer <token>'.
    """
    try:
        user = db.query(User).filter(User.nickname == body.nickname).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Signin lookup failed for nickname=%s", body.nickname)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Signin failed.",
        ) from e
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Check your nickname or password.",
        )
    try:
        token = issue_access_token(user.id)
    except (jwt.PyJWTError, NotImplementedError) as e:
        logger.exception("Token issuance failed for user_id=%s", user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Signin failed.",
        ) from e

    max_age = settings.JWT_EXPIRE_MINUTES * 60 if settings.JWT_EXPIRE_MINUTES > 0 else None
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        f"{BEARER_PREFIX}{token}",
        max_age=max_age,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )
    logger.info("User signed in: user_id=%s", user.id)
    return TokenResponse(token=token)


@router.post("/signout", response_model=MessageResponse)
def signout(response: Response) -> MessageResponse:
    """Clear the authorization cookie. The token itself stays valid until it expires."""
    response.delete_cookie(
        settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )
    return MessageResponse(message="Signed out.")


@router.get("/users/me", response_model=CurrentUser)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    return current_user


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    users = db.query(User).order_by(User.id).all()
    return UsersListResponse(
        users=[UserListItem(id=u.id, nickname=u.nickname, role=u.role) for u in users]
    )
