"""Submission model: an app or project entered into the awards."""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, ForeignKey, Boolean, Integer, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibe_awards.models.base import Base, IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from vibe_awards.models.user import User
    from vibe_awards.models.engagement import Like, Nomination, Vote

SUBMISSION_STATUSES = ("pending", "approved", "rejected")
PROJECT_TYPES = ("app", "game", "visual", "music", "video", "cultural")


class Submission(IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin, Base):
    """An app/project submitted by a developer.

    like_count and nomination_count are denormalized caches of the likes and
    nominations tables. They only move through CountedAssociation, so they
    always equal the number of association rows.
    """

    __tablename__ = "submissions"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    short_description: Mapped[str] = mapped_column(String(500), nullable=False)
    full_description: Mapped[str] = mapped_column(Text, nullable=False)

    developer_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    project_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="app",
        comment="'app', 'game', 'visual', 'music', 'video' or 'cultural'"
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    platform: Mapped[str] = mapped_column(String(100), nullable=False)

    # Links (uploads are out of scope, so media is referenced by URL)
    icon_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    store_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    demo_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    github_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    # Moderation and curation flags (set outside the engagement core)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    trending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    staff_pick: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    battle_ready: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    award_eligible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Engagement metrics
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    nomination_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_submissions_status"),
        CheckConstraint("like_count >= 0", name="ck_submissions_like_count"),
        CheckConstraint("nomination_count >= 0", name="ck_submissions_nomination_count"),
        CheckConstraint("view_count >= 0", name="ck_submissions_view_count"),
        Index("idx_submissions_status_created", "status", "created_at"),
    )

    # Relationships
    developer: Mapped["User"] = relationship(back_populates="submissions")
    features: Mapped[List["SubmissionFeature"]] = relationship(
        back_populates="submission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SubmissionFeature.id",
    )
    likes: Mapped[List["Like"]] = relationship(
        back_populates="submission", cascade="all, delete-orphan", passive_deletes=True
    )
    nominations: Mapped[List["Nomination"]] = relationship(
        back_populates="submission", cascade="all, delete-orphan", passive_deletes=True
    )
    votes: Mapped[List["Vote"]] = relationship(
        back_populates="submission", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, name='{self.name}', status={self.status})>"


class SubmissionFeature(IntPrimaryKeyMixin, Base):
    """A free-text feature bullet listed on a submission."""

    __tablename__ = "submission_features"

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    submission: Mapped["Submission"] = relationship(back_populates="features")
