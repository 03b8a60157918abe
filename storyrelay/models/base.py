"""SQLAlchemy declarative Base shared by users, stories, relays and likes."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass
