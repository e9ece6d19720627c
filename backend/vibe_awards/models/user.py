"""User model for authentication and ownership."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibe_awards.models.base import Base, IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from vibe_awards.models.submission import Submission
    from vibe_awards.models.collaboration import CollaborationPost, CollaborationInterest

USER_ROLES = ("developer", "voter", "admin")


class User(IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin, Base):
    """Registered account.

    Supports email/password authentication with bcrypt hashing. Engagement
    rows only weakly reference users; see Like/Nomination/Vote.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True,
        comment="Display name (unique)"
    )
    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True,
        comment="User email address (unique)"
    )
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False,
        comment="bcrypt hashed password"
    )
    role: Mapped[str] = mapped_column(
        String(16), nullable=False, default="developer",
        comment="'developer', 'voter' or 'admin'"
    )

    # Profile
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    twitter_handle: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
        comment="Whether user account is active"
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
        comment="Last login timestamp"
    )

    __table_args__ = (
        CheckConstraint("role IN ('developer', 'voter', 'admin')", name="ck_users_role"),
    )

    # Relationships
    submissions: Mapped[List["Submission"]] = relationship(
        back_populates="developer", cascade="all, delete-orphan", passive_deletes=True
    )
    collaboration_posts: Mapped[List["CollaborationPost"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )
    collaboration_interests: Mapped[List["CollaborationInterest"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
