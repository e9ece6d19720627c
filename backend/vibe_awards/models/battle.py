"""Battle model: a head-to-head pairing of two submissions."""

from datetime import date
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, ForeignKey, Integer, Date, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibe_awards.models.base import Base, IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from vibe_awards.models.submission import Submission
    from vibe_awards.models.engagement import Vote

BATTLE_STATUSES = ("upcoming", "active", "completed")


class Battle(IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin, Base):
    """A battle between submission A and submission B.

    votes_a / votes_b / total_votes are denormalized from the votes table
    and always move together, so total_votes == votes_a + votes_b holds at
    the store level.
    """

    __tablename__ = "battles"

    submission_a_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    submission_b_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Featured")
    battle_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="upcoming",
        comment="'upcoming', 'active' or 'completed'"
    )

    # Tally
    votes_a: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    votes_b: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    winner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("submissions.id", ondelete="SET NULL"),
        nullable=True,
        comment="Set when the battle completes; one of the two sides"
    )

    __table_args__ = (
        CheckConstraint("status IN ('upcoming', 'active', 'completed')", name="ck_battles_status"),
        CheckConstraint("submission_a_id <> submission_b_id", name="ck_battles_distinct_sides"),
        CheckConstraint("votes_a >= 0 AND votes_b >= 0", name="ck_battles_votes_non_negative"),
        CheckConstraint("total_votes = votes_a + votes_b", name="ck_battles_total_votes"),
        CheckConstraint(
            "winner_id IS NULL OR winner_id = submission_a_id OR winner_id = submission_b_id",
            name="ck_battles_winner_side",
        ),
        Index("idx_battles_status_date", "status", "battle_date"),
    )

    # Relationships
    submission_a: Mapped["Submission"] = relationship(foreign_keys=[submission_a_id])
    submission_b: Mapped["Submission"] = relationship(foreign_keys=[submission_b_id])
    votes: Mapped[List["Vote"]] = relationship(
        back_populates="battle", cascade="all, delete-orphan", passive_deletes=True
    )

    def side_counter(self, submission_id: int) -> Optional[str]:
        """Name of the tally column for submission_id, or None if it is not a side."""
        if submission_id == self.submission_a_id:
            return "votes_a"
        if submission_id == self.submission_b_id:
            return "votes_b"
        return None

    def __repr__(self) -> str:
        return (
            f"<Battle(id={self.id}, a={self.submission_a_id}, b={self.submission_b_id}, "
            f"status={self.status}, votes={self.votes_a}:{self.votes_b})>"
        )
