"""Account registration: nickname/password rules, duplicate check, hashed persistence."""

import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storyrelay.core.security import hash_password
from storyrelay.models.user import User, UserRole

logger = logging.getLogger(__name__)

# Matched with fullmatch so a trailing newline never slips through.
NICKNAME_PATTERN = re.compile(r"[A-Za-z0-9]{3,}")
PASSWORD_PATTERN = re.compile(r".{4,}")

INVALID_NICKNAME = "Nickname format is invalid."
INVALID_PASSWORD = "Password format is invalid."
PASSWORD_CONTAINS_NICKNAME = "Password must not contain the nickname."
DUPLICATE_NICKNAME = "Nickname is already taken."


class RegistrationError(Exception):
    """Raised when a signup request fails validation or the nickname is taken."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def validate_credentials(nickname: str, password: str) -> None:
    """
    Apply the format rules in order and raise RegistrationError on the first failure.

    1. nickname: letters and digits only, at least 3 characters
    2. password: any characters except newlines, at least 4
    3. password must not contain the nickname (case-sensitive)
    """
    if not NICKNAME_PATTERN.fullmatch(nickname):
        raise RegistrationError(INVALID_NICKNAME)
    if not PASSWORD_PATTERN.fullmatch(password):
        raise RegistrationError(INVALID_PASSWORD)
    if nickname in password:
        raise RegistrationError(PASSWORD_CONTAINS_NICKNAME)


def nickname_exists(db: Session, nickname: str) -> bool:
    return db.query(User.id).filter(User.nickname == nickname).first() is not None


def register_user(
    db: Session,
    nickname: str,
    password: str,
    role: UserRole = UserRole.STANDARD,
) -> User:
    """
    Validate credentials, check the nickname is free, then hash and persist the user.

    A unique-constraint violation on insert (two signups racing for one nickname)
    is reported as a duplicate nickname. Other database errors propagate.
    """
    validate_credentials(nickname, password)
    if nickname_exists(db, nickname):
        raise RegistrationError(DUPLICATE_NICKNAME)

    user = User(
        nickname=nickname,
        password_hash=hash_password(password),
        role=role.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise RegistrationError(DUPLICATE_NICKNAME) from e
    db.refresh(user)
    logger.info("User registered: user_id=%s role=%s", user.id, user.role)
    return user
