"""Collaboration board: posts looking for teammates and expressed interest."""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, ForeignKey, Boolean, Integer, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibe_awards.models.base import Base, IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from vibe_awards.models.user import User

PROJECT_STAGES = ("idea", "prototype", "mvp", "near_complete")
COLLABORATION_TYPES = ("co_founder", "developer", "designer", "marketer", "mentor", "other")
POST_STATUSES = ("open", "in_progress", "closed")
INTEREST_STATUSES = ("pending", "accepted", "rejected")


class CollaborationPost(IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin, Base):
    """A request for collaborators.

    interest_count mirrors the number of CollaborationInterest rows and is
    maintained the same way as submission like counts.
    """

    __tablename__ = "collaboration_posts"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    project_stage: Mapped[str] = mapped_column(String(16), nullable=False)
    collaboration_type: Mapped[str] = mapped_column(String(16), nullable=False)
    skills_needed: Mapped[str] = mapped_column(Text, nullable=False)
    project_category: Mapped[str] = mapped_column(String(100), nullable=False)
    tech_stack: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    repo_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    demo_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    contact_method: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    equity_offered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paid_opportunity: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    time_commitment: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    deadline: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="open")
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    interest_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "project_stage IN ('idea', 'prototype', 'mvp', 'near_complete')",
            name="ck_collab_posts_stage",
        ),
        CheckConstraint(
            "collaboration_type IN ('co_founder', 'developer', 'designer', 'marketer', 'mentor', 'other')",
            name="ck_collab_posts_type",
        ),
        CheckConstraint("status IN ('open', 'in_progress', 'closed')", name="ck_collab_posts_status"),
        CheckConstraint("interest_count >= 0", name="ck_collab_posts_interest_count"),
        Index("idx_collab_posts_status_created", "status", "created_at"),
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="collaboration_posts")
    interests: Mapped[List["CollaborationInterest"]] = relationship(
        back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<CollaborationPost(id={self.id}, title='{self.title[:50]}', status={self.status})>"


class CollaborationInterest(IntPrimaryKeyMixin, TimestampMixin, Base):
    """A user's response to a collaboration post; one per (post, user)."""

    __tablename__ = "collaboration_interests"

    post_id: Mapped[int] = mapped_column(
        ForeignKey("collaboration_posts.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    portfolio_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    contact_info: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_collab_interest_post_user"),
        CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name="ck_collab_interests_status"),
    )

    post: Mapped["CollaborationPost"] = relationship(back_populates="interests")
    user: Mapped["User"] = relationship(back_populates="collaboration_interests")

    def __repr__(self) -> str:
        return f"<CollaborationInterest(post={self.post_id}, user={self.user_id}, status={self.status})>"
