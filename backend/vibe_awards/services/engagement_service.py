"""Engagement service: likes, nominations and battle votes.

Every operation is keyed on an ActingIdentity and delegates the row plus
counter bookkeeping to CountedAssociation. The existence checks here are
early exits; the unique constraints in the store decide races.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from vibe_awards.core.exceptions import (
    AlreadyActedError,
    AlreadyNominatedError,
    AlreadyVotedError,
    BattleClosedError,
    InvalidSubmissionError,
)
from vibe_awards.models.battle import Battle
from vibe_awards.models.engagement import Like, Nomination, Vote
from vibe_awards.models.submission import Submission
from vibe_awards.services.counted_association import CountedAssociation
from vibe_awards.services.identity import ActingIdentity
from vibe_awards.services.lookup import Ref, get_by_ref, matches_ref

logger = structlog.get_logger(__name__)

LIKE_COUNTERS = {"like_count": 1}
NOMINATION_COUNTERS = {"nomination_count": 1}


@dataclass
class LikeResult:
    liked: bool
    like_count: int


@dataclass
class VoteResult:
    battle_id: int
    submission_id: int
    votes_a: int
    votes_b: int
    total_votes: int


class EngagementService:
    """Handles like toggling, nominations and battle voting."""

    def __init__(self, db: AsyncSession):
        """Initialize engagement service.

        Args:
            db: Async database session
        """
        self.db = db
        self.likes = CountedAssociation(
            db,
            model=Like,
            target_model=Submission,
            target_column="submission_id",
            owner_column="actor_key",
            target_label="App",
        )
        self.nominations = CountedAssociation(
            db,
            model=Nomination,
            target_model=Submission,
            target_column="submission_id",
            owner_column="actor_key",
            target_label="App",
            duplicate_error=AlreadyNominatedError,
        )
        self.votes = CountedAssociation(
            db,
            model=Vote,
            target_model=Battle,
            target_column="battle_id",
            owner_column="actor_key",
            target_label="Battle",
            duplicate_error=AlreadyVotedError,
        )
        self.logger = logger.bind(service="engagement_service")

    async def toggle_like(self, app_ref: Ref, identity: ActingIdentity) -> LikeResult:
        """Like the app if the identity has not, otherwise remove the like.

        A concurrent insert by the same identity is treated as an
        existing like, so the call still flips state instead of failing.
        """
        submission = await get_by_ref(self.db, Submission, app_ref, "App")

        if await self.likes.exists(submission.id, identity.key):
            await self.likes.remove(submission, identity.key, LIKE_COUNTERS)
            liked = False
        else:
            try:
                await self.likes.add(
                    submission, identity.key, LIKE_COUNTERS, **identity.row_fields()
                )
                liked = True
            except AlreadyActedError:
                await self.likes.remove(submission, identity.key, LIKE_COUNTERS)
                liked = False

        self.logger.info(
            "like_toggled",
            submission_id=submission.id,
            actor=identity.key,
            liked=liked,
            like_count=submission.like_count,
        )
        return LikeResult(liked=liked, like_count=submission.like_count)

    async def nominate(self, app_ref: Ref, identity: ActingIdentity) -> int:
        """Record a one-shot nomination.

        Returns:
            The app's nomination count after the nomination

        Raises:
            NotFoundError: app does not exist
            AlreadyNominatedError: identity already nominated this app
        """
        submission = await get_by_ref(self.db, Submission, app_ref, "App")

        if await self.nominations.exists(submission.id, identity.key):
            self.logger.info("duplicate_nomination_rejected", submission_id=submission.id, actor=identity.key)
            raise AlreadyNominatedError()

        await self.nominations.add(
            submission, identity.key, NOMINATION_COUNTERS, **identity.row_fields()
        )
        self.logger.info(
            "nomination_recorded",
            submission_id=submission.id,
            actor=identity.key,
            nomination_count=submission.nomination_count,
        )
        return submission.nomination_count

    @staticmethod
    def _resolve_side(battle: Battle, app_ref: Ref) -> int:
        for side in (battle.submission_a, battle.submission_b):
            if matches_ref(side, app_ref):
                return side.id
        raise InvalidSubmissionError()

    async def cast_vote(
        self,
        battle_ref: Ref,
        app_ref: Ref,
        identity: ActingIdentity,
        user_agent: Optional[str] = None,
    ) -> VoteResult:
        """Cast the identity's single vote in a battle.

        Raises:
            NotFoundError: battle does not exist
            BattleClosedError: battle is not active
            InvalidSubmissionError: app_ref is neither side of the battle
            AlreadyVotedError: identity already voted in this battle
        """
        battle = await get_by_ref(
            self.db,
            Battle,
            battle_ref,
            "Battle",
            options=(selectinload(Battle.submission_a), selectinload(Battle.submission_b)),
        )
        if battle.status != "active":
            raise BattleClosedError(battle.status)

        submission_id = self._resolve_side(battle, app_ref)

        if await self.votes.exists(battle.id, identity.key):
            self.logger.info("duplicate_vote_rejected", battle_id=battle.id, actor=identity.key)
            raise AlreadyVotedError()

        counters = {battle.side_counter(submission_id): 1, "total_votes": 1}
        await self.votes.add(
            battle,
            identity.key,
            counters,
            submission_id=submission_id,
            user_agent=user_agent[:500] if user_agent else None,
            **identity.row_fields(),
        )

        self.logger.info(
            "vote_cast",
            battle_id=battle.id,
            submission_id=submission_id,
            actor=identity.key,
            votes_a=battle.votes_a,
            votes_b=battle.votes_b,
        )
        return VoteResult(
            battle_id=battle.id,
            submission_id=submission_id,
            votes_a=battle.votes_a,
            votes_b=battle.votes_b,
            total_votes=battle.total_votes,
        )

    async def get_status(self, app_ref: Ref, identity: ActingIdentity) -> Dict[str, bool]:
        """Whether the identity has liked and nominated the app."""
        submission = await get_by_ref(self.db, Submission, app_ref, "App")
        return {
            "liked": await self.likes.exists(submission.id, identity.key),
            "nominated": await self.nominations.exists(submission.id, identity.key),
        }

    async def get_vote(self, battle_ref: Ref, identity: ActingIdentity) -> Optional[int]:
        """The submission id the identity voted for in a battle, or None."""
        battle = await get_by_ref(self.db, Battle, battle_ref, "Battle")
        vote = await self.votes.find(battle.id, identity.key)
        return vote.submission_id if vote else None
