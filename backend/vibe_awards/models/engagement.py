"""Engagement association tables: likes, nominations and battle votes.

Each row records one acting identity ("user:<id>" or "ip:<address>")
acting on one target. The unique constraint on (actor_key, target) is the
real de-duplication guard; service-level existence checks are only an
early exit.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from vibe_awards.models.base import Base, IntPrimaryKeyMixin, TimestampMixin

if TYPE_CHECKING:
    from vibe_awards.models.submission import Submission
    from vibe_awards.models.battle import Battle


class ActorMixin:
    """Who acted: the de-duplication key plus the raw inputs it came from."""

    actor_key: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True,
        comment="'user:<id>' or 'ip:<address>'"
    )
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    @declared_attr
    def user_id(cls) -> Mapped[Optional[int]]:
        # Deleting a user keeps the row (and its actor_key) alive.
        return mapped_column(
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True, index=True,
        )


class Like(IntPrimaryKeyMixin, ActorMixin, TimestampMixin, Base):
    """One like per acting identity per submission; toggled by insert/delete."""

    __tablename__ = "submission_likes"

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    __table_args__ = (
        UniqueConstraint("actor_key", "submission_id", name="uq_like_actor_submission"),
    )

    submission: Mapped["Submission"] = relationship(back_populates="likes")

    def __repr__(self) -> str:
        return f"<Like(actor={self.actor_key}, submission={self.submission_id})>"


class Nomination(IntPrimaryKeyMixin, ActorMixin, TimestampMixin, Base):
    """One nomination per acting identity per submission; never withdrawn."""

    __tablename__ = "nominations"

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )

    __table_args__ = (
        UniqueConstraint("actor_key", "submission_id", name="uq_nomination_actor_submission"),
    )

    submission: Mapped["Submission"] = relationship(back_populates="nominations")

    def __repr__(self) -> str:
        return f"<Nomination(actor={self.actor_key}, submission={self.submission_id})>"


class Vote(IntPrimaryKeyMixin, ActorMixin, TimestampMixin, Base):
    """One vote per acting identity per battle.

    The key is battle-scoped, not submission-scoped, so a voter cannot
    switch sides either.
    """

    __tablename__ = "battle_votes"

    battle_id: Mapped[int] = mapped_column(
        ForeignKey("battles.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        UniqueConstraint("actor_key", "battle_id", name="uq_vote_actor_battle"),
    )

    battle: Mapped["Battle"] = relationship(back_populates="votes")
    submission: Mapped["Submission"] = relationship(back_populates="votes")

    def __repr__(self) -> str:
        return f"<Vote(actor={self.actor_key}, battle={self.battle_id}, submission={self.submission_id})>"
