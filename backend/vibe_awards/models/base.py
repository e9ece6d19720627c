"""Declarative base and shared column mixins."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class IntPrimaryKeyMixin:
    """Autoincrement integer surrogate key."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class PublicUUIDMixin:
    """Immutable public identifier exposed next to the integer id."""

    uuid: Mapped[str] = mapped_column(
        String(36), unique=True, nullable=False, index=True,
        default=lambda: str(uuid.uuid4()),
        comment="Public identifier; path parameters accept it or the id"
    )


class TimestampMixin:
    """created_at / updated_at, generated client-side so they never need a reload."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
