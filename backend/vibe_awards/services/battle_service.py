"""Battle administration: scheduling battles and moving them through their lifecycle."""

from datetime import date
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from vibe_awards.core.exceptions import NotFoundError, ValidationFailedError
from vibe_awards.models.battle import Battle
from vibe_awards.models.submission import Submission
from vibe_awards.services.lookup import Ref, find_by_ref, get_by_ref, matches_ref

logger = structlog.get_logger(__name__)

# Allowed status moves; completed is terminal.
STATUS_TRANSITIONS = {
    "upcoming": ("active", "completed"),
    "active": ("completed",),
    "completed": (),
}

BATTLE_LOAD_OPTIONS = (
    selectinload(Battle.submission_a).selectinload(Submission.developer),
    selectinload(Battle.submission_b).selectinload(Submission.developer),
)


class BattleService:
    """Creates battles and applies status transitions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="battle_service")

    async def get(self, ref: Ref) -> Battle:
        """Load a battle with both sides, raising NotFoundError if absent."""
        return await get_by_ref(self.db, Battle, ref, "Battle", options=BATTLE_LOAD_OPTIONS)

    async def _reload(self, battle_id: int) -> Battle:
        stmt = (
            select(Battle)
            .options(*BATTLE_LOAD_OPTIONS)
            .where(Battle.id == battle_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def create(
        self,
        submission_a_ref: Ref,
        submission_b_ref: Ref,
        battle_date: date,
        category: str = "Featured",
        status: str = "upcoming",
    ) -> Battle:
        """Pair two distinct existing submissions in a new battle.

        Raises:
            NotFoundError: either submission does not exist
            ValidationFailedError: both refs name the same submission, or
                the initial status is not upcoming/active
        """
        if status not in ("upcoming", "active"):
            raise ValidationFailedError("A new battle must be upcoming or active")

        submission_a = await find_by_ref(self.db, Submission, submission_a_ref)
        submission_b = await find_by_ref(self.db, Submission, submission_b_ref)
        if submission_a is None or submission_b is None:
            raise NotFoundError("App")
        if submission_a.id == submission_b.id:
            raise ValidationFailedError("A battle needs two different apps")

        battle = Battle(
            submission_a_id=submission_a.id,
            submission_b_id=submission_b.id,
            battle_date=battle_date,
            category=category,
            status=status,
        )
        self.db.add(battle)
        await self.db.flush()

        self.logger.info(
            "battle_created",
            battle_id=battle.id,
            submission_a_id=submission_a.id,
            submission_b_id=submission_b.id,
            status=status,
        )
        return await self._reload(battle.id)

    async def update_status(
        self,
        ref: Ref,
        status: str,
        winner_ref: Optional[Ref] = None,
    ) -> Battle:
        """Move a battle to a new status.

        Completing a battle fixes its winner: the explicitly supplied side
        if given, otherwise the side with more votes. A tie with no explicit
        winner completes without one.

        Raises:
            ValidationFailedError: transition not allowed, or the winner is
                not one of the battle's sides
        """
        battle = await self.get(ref)

        if status == battle.status:
            return battle
        if status not in STATUS_TRANSITIONS.get(battle.status, ()):
            raise ValidationFailedError(
                f"Cannot move battle from {battle.status} to {status}"
            )
        if winner_ref is not None and status != "completed":
            raise ValidationFailedError("winner_id is only accepted when completing a battle")

        winner_id = None
        if status == "completed":
            if winner_ref is not None:
                winner_id = self._side_id(battle, winner_ref)
            elif battle.votes_a > battle.votes_b:
                winner_id = battle.submission_a_id
            elif battle.votes_b > battle.votes_a:
                winner_id = battle.submission_b_id

        battle.status = status
        battle.winner_id = winner_id
        await self.db.flush()

        self.logger.info(
            "battle_status_changed",
            battle_id=battle.id,
            status=status,
            winner_id=winner_id,
            votes_a=battle.votes_a,
            votes_b=battle.votes_b,
        )
        return battle

    @staticmethod
    def _side_id(battle: Battle, ref: Ref) -> int:
        for side in (battle.submission_a, battle.submission_b):
            if matches_ref(side, ref):
                return side.id
        raise ValidationFailedError("winner_id is not part of this battle")
