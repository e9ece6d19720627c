"""Read-side views over submissions, battles and collaboration posts.

Listing counts are computed from the association tables at read time
with correlated subqueries, so they are exactly what the store holds
when the query runs, independent of the denormalized counter columns.
"""

from typing import Any, Dict, List, Optional, Tuple

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from vibe_awards.core.exceptions import NotFoundError
from vibe_awards.models.battle import Battle
from vibe_awards.models.collaboration import CollaborationPost
from vibe_awards.models.engagement import Like, Nomination, Vote
from vibe_awards.models.submission import Submission
from vibe_awards.models.user import User
from vibe_awards.services.battle_service import BATTLE_LOAD_OPTIONS
from vibe_awards.services.lookup import Ref, ref_clause

logger = structlog.get_logger(__name__)

SUBMISSION_SUMMARY_FIELDS = (
    "id",
    "uuid",
    "name",
    "short_description",
    "project_type",
    "category",
    "platform",
    "icon_url",
    "website_url",
    "store_url",
    "demo_url",
    "github_url",
    "status",
    "featured",
    "trending",
    "staff_pick",
    "battle_ready",
    "award_eligible",
    "view_count",
    "developer_id",
    "created_at",
)

DEVELOPER_PROFILE_FIELDS = (
    "avatar_url",
    "bio",
    "website_url",
    "twitter_handle",
    "linkedin_url",
)

POST_FIELDS = (
    "id",
    "uuid",
    "user_id",
    "title",
    "description",
    "project_stage",
    "collaboration_type",
    "skills_needed",
    "project_category",
    "tech_stack",
    "repo_url",
    "demo_url",
    "contact_method",
    "equity_offered",
    "paid_opportunity",
    "time_commitment",
    "deadline",
    "status",
    "view_count",
    "interest_count",
    "created_at",
)


def _live_count(model, column):
    return (
        select(func.count(model.id))
        .where(column == Submission.id)
        .correlate(Submission)
        .scalar_subquery()
    )


def _pick(obj, fields) -> Dict[str, Any]:
    return {name: getattr(obj, name) for name in fields}


class QueryService:
    """Read-only listing and detail views."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="query_service")

    def _submission_columns(self):
        return (
            Submission,
            User.username.label("developer_name"),
            _live_count(Like, Like.submission_id).label("like_count"),
            _live_count(Nomination, Nomination.submission_id).label("nomination_count"),
            _live_count(Vote, Vote.submission_id).label("vote_count"),
        )

    @staticmethod
    def _submission_view(row) -> Dict[str, Any]:
        submission, developer_name, like_count, nomination_count, vote_count = row
        data = _pick(submission, SUBMISSION_SUMMARY_FIELDS)
        data.update(
            developer_name=developer_name,
            like_count=like_count or 0,
            nomination_count=nomination_count or 0,
            vote_count=vote_count or 0,
        )
        return data

    async def list_submissions(
        self,
        category: Optional[str] = None,
        status: Optional[str] = "approved",
        project_type: Optional[str] = None,
        featured: Optional[bool] = None,
        trending: Optional[bool] = None,
        staff_pick: Optional[bool] = None,
        battle_ready: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List submissions with live engagement counts.

        Args:
            category: Category filter; "all" or None disables it
            status: Status filter, approved unless told otherwise; "all" disables it
            project_type: Project type filter
            featured, trending, staff_pick, battle_ready: Flag filters
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (page of submissions, total matching the filters)
        """
        conditions = []
        if category and category != "all":
            conditions.append(Submission.category == category)
        if status and status != "all":
            conditions.append(Submission.status == status)
        if project_type and project_type != "all":
            conditions.append(Submission.project_type == project_type)
        for column, value in (
            (Submission.featured, featured),
            (Submission.trending, trending),
            (Submission.staff_pick, staff_pick),
            (Submission.battle_ready, battle_ready),
        ):
            if value is not None:
                conditions.append(column == value)

        query = (
            select(*self._submission_columns())
            .join(User, Submission.developer_id == User.id)
            .where(*conditions)
            .order_by(Submission.created_at.desc(), Submission.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_query = select(func.count(Submission.id)).where(*conditions)

        result = await self.db.execute(query)
        apps = [self._submission_view(row) for row in result.all()]

        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        self.logger.info("submissions_listed", count=len(apps), total=total, category=category)
        return apps, total

    async def get_submission(self, ref: Ref) -> Dict[str, Any]:
        """Submission detail with features and developer profile.

        Also increments the submission's view count.

        Raises:
            NotFoundError: no submission matches ref
        """
        bump = (
            update(Submission)
            .where(ref_clause(Submission, ref))
            .values(view_count=Submission.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        bumped = await self.db.execute(bump)
        if bumped.rowcount == 0:
            raise NotFoundError("App", ref)

        query = (
            select(*self._submission_columns())
            .join(User, Submission.developer_id == User.id)
            .options(
                selectinload(Submission.features),
                selectinload(Submission.developer),
            )
            .where(ref_clause(Submission, ref))
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        row = result.one()

        submission = row[0]
        data = self._submission_view(row)
        data["full_description"] = submission.full_description
        data["features"] = [feature.name for feature in submission.features]
        data["developer"] = {
            "id": submission.developer.id,
            "uuid": submission.developer.uuid,
            "username": submission.developer.username,
            **_pick(submission.developer, DEVELOPER_PROFILE_FIELDS),
        }
        return data

    @staticmethod
    def _battle_side(submission: Submission) -> Dict[str, Any]:
        return {
            "id": submission.id,
            "uuid": submission.uuid,
            "name": submission.name,
            "short_description": submission.short_description,
            "icon_url": submission.icon_url,
            "category": submission.category,
            "platform": submission.platform,
            "developer_name": submission.developer.username,
        }

    def battle_view(self, battle: Battle) -> Dict[str, Any]:
        """Battle with both sides' summary fields; sides must be loaded."""
        return {
            "id": battle.id,
            "uuid": battle.uuid,
            "category": battle.category,
            "battle_date": battle.battle_date,
            "status": battle.status,
            "votes_a": battle.votes_a,
            "votes_b": battle.votes_b,
            "total_votes": battle.total_votes,
            "winner_id": battle.winner_id,
            "app_a": self._battle_side(battle.submission_a),
            "app_b": self._battle_side(battle.submission_b),
            "created_at": battle.created_at,
        }

    async def list_battles(self, status: Optional[str] = None, limit: int = 20) -> List[Dict[str, Any]]:
        """Battles newest battle_date first, optionally filtered by status."""
        query = select(Battle).options(*BATTLE_LOAD_OPTIONS)
        if status and status != "all":
            query = query.where(Battle.status == status)
        query = query.order_by(Battle.battle_date.desc(), Battle.id.desc()).limit(limit)

        result = await self.db.execute(query)
        return [self.battle_view(battle) for battle in result.scalars().all()]

    async def get_current_battle(self) -> Optional[Dict[str, Any]]:
        """The most recent active battle, or None."""
        query = (
            select(Battle)
            .options(*BATTLE_LOAD_OPTIONS)
            .where(Battle.status == "active")
            .order_by(Battle.battle_date.desc(), Battle.id.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        battle = result.scalar_one_or_none()
        return self.battle_view(battle) if battle else None

    async def get_battle(self, ref: Ref) -> Dict[str, Any]:
        query = (
            select(Battle)
            .options(*BATTLE_LOAD_OPTIONS)
            .where(ref_clause(Battle, ref))
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        battle = result.scalar_one_or_none()
        if battle is None:
            raise NotFoundError("Battle", ref)
        return self.battle_view(battle)

    @staticmethod
    def _post_view(post: CollaborationPost, owner_name: str) -> Dict[str, Any]:
        data = _pick(post, POST_FIELDS)
        data["owner_name"] = owner_name
        return data

    async def list_collaboration_posts(
        self,
        category: Optional[str] = None,
        stage: Optional[str] = None,
        collaboration_type: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Open collaboration posts, newest first, with the total match count."""
        conditions = [CollaborationPost.status == "open"]
        if category and category != "all":
            conditions.append(CollaborationPost.project_category == category)
        if stage and stage != "all":
            conditions.append(CollaborationPost.project_stage == stage)
        if collaboration_type and collaboration_type != "all":
            conditions.append(CollaborationPost.collaboration_type == collaboration_type)

        query = (
            select(CollaborationPost, User.username)
            .join(User, CollaborationPost.user_id == User.id)
            .where(*conditions)
            .order_by(CollaborationPost.created_at.desc(), CollaborationPost.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_query = select(func.count(CollaborationPost.id)).where(*conditions)

        result = await self.db.execute(query)
        posts = [self._post_view(post, owner_name) for post, owner_name in result.all()]

        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0
        return posts, total

    async def get_collaboration_post(self, ref: Ref) -> Dict[str, Any]:
        """Post detail; increments the post's view count.

        Raises:
            NotFoundError: no post matches ref
        """
        bump = (
            update(CollaborationPost)
            .where(ref_clause(CollaborationPost, ref))
            .values(view_count=CollaborationPost.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        bumped = await self.db.execute(bump)
        if bumped.rowcount == 0:
            raise NotFoundError("Collaboration post", ref)

        query = (
            select(CollaborationPost, User.username)
            .join(User, CollaborationPost.user_id == User.id)
            .where(ref_clause(CollaborationPost, ref))
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        post, owner_name = result.one()
        return self._post_view(post, owner_name)
