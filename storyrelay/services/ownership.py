"""Ownership and role policy applied before any update or delete."""

from typing import TypeVar

from sqlalchemy.orm import Session

from storyrelay.models.user import UserRole
from storyrelay.schemas.auth import CurrentUser

ModelT = TypeVar("ModelT")


class ResourceNotFoundError(Exception):
    """Raised when the target of an operation does not exist."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PermissionDeniedError(Exception):
    """Raised when the caller is neither the owner nor an admin."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def is_admin(user: CurrentUser) -> bool:
    return user.role == UserRole.ADMIN.value


def can_modify(user: CurrentUser, owner_id: int) -> bool:
    """True when the caller owns the resource or holds the admin role."""
    return user.id == owner_id or is_admin(user)


def load_for_update(
    db: Session,
    model: type[ModelT],
    resource_id: int,
    user: CurrentUser,
    *,
    not_found: str = "Resource not found.",
    forbidden: str = "You do not have permission to modify this resource.",
    **scope: object,
) -> ModelT:
    """
    Return the row the caller is allowed to mutate.

    Existence is checked first: a missing row (or one outside the given scope
    filters, e.g. story_id for a relay) raises ResourceNotFoundError whoever
    the caller is. Only then is ownership compared, raising PermissionDeniedError.
    """
    query = db.query(model).filter(model.id == resource_id)
    for column, value in scope.items():
        query = query.filter(getattr(model, column) == value)
    row = query.first()
    if row is None:
        raise ResourceNotFoundError(not_found)
    if not can_modify(user, row.user_id):
        raise PermissionDeniedError(forbidden)
    return row
