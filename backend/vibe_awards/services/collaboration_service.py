"""Collaboration board write paths: posts, interest and interest review."""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.core.exceptions import (
    AlreadyInterestedError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from vibe_awards.models.collaboration import CollaborationInterest, CollaborationPost
from vibe_awards.models.user import User
from vibe_awards.services.counted_association import CountedAssociation
from vibe_awards.services.lookup import Ref, get_by_ref

logger = structlog.get_logger(__name__)

INTEREST_COUNTERS = {"interest_count": 1}


class CollaborationService:
    """Handles collaboration posts and the interest users express in them."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.interests = CountedAssociation(
            db,
            model=CollaborationInterest,
            target_model=CollaborationPost,
            target_column="post_id",
            owner_column="user_id",
            target_label="Collaboration post",
            duplicate_error=AlreadyInterestedError,
        )
        self.logger = logger.bind(service="collaboration_service")

    async def create_post(self, owner: User, **fields) -> CollaborationPost:
        """Create an open post owned by owner.

        Args:
            owner: Authenticated author
            **fields: Post columns (title, description, project_stage, ...)
        """
        post = CollaborationPost(user_id=owner.id, status="open", **fields)
        self.db.add(post)
        await self.db.flush()
        self.logger.info("collaboration_post_created", post_id=post.id, owner_id=owner.id)
        return post

    async def express_interest(
        self,
        post_ref: Ref,
        user: User,
        message: Optional[str] = None,
        portfolio_url: Optional[str] = None,
        contact_info: Optional[str] = None,
    ) -> CollaborationInterest:
        """Record user's interest in a post and bump its interest_count.

        Raises:
            NotFoundError: post does not exist
            ValidationFailedError: own post, or post no longer open
            AlreadyInterestedError: user already expressed interest
        """
        post = await get_by_ref(self.db, CollaborationPost, post_ref, "Collaboration post")
        if post.user_id == user.id:
            raise ValidationFailedError("Cannot express interest in your own post")
        if post.status != "open":
            raise ValidationFailedError("This post is no longer accepting collaborators")

        if await self.interests.exists(post.id, user.id):
            raise AlreadyInterestedError()

        interest = await self.interests.add(
            post,
            user.id,
            INTEREST_COUNTERS,
            message=message,
            portfolio_url=portfolio_url,
            contact_info=contact_info,
        )
        self.logger.info(
            "collaboration_interest_recorded",
            post_id=post.id,
            user_id=user.id,
            interest_count=post.interest_count,
        )
        return interest

    async def review_interest(
        self,
        post_ref: Ref,
        interest_id: int,
        status: str,
        reviewer: User,
    ) -> CollaborationInterest:
        """Accept or reject an interest on one of reviewer's posts.

        Accepting an interest on an open post moves the post to in_progress.

        Raises:
            NotFoundError: post or interest does not exist
            PermissionDeniedError: reviewer does not own the post
        """
        if status not in ("accepted", "rejected"):
            raise ValidationFailedError("status must be accepted or rejected")

        post = await get_by_ref(self.db, CollaborationPost, post_ref, "Collaboration post")
        if post.user_id != reviewer.id and not reviewer.is_admin:
            raise PermissionDeniedError()

        stmt = select(CollaborationInterest).where(
            CollaborationInterest.id == interest_id,
            CollaborationInterest.post_id == post.id,
        )
        result = await self.db.execute(stmt)
        interest = result.scalar_one_or_none()
        if interest is None:
            raise NotFoundError("Interest", interest_id)

        interest.status = status
        if status == "accepted" and post.status == "open":
            post.status = "in_progress"
        await self.db.flush()

        self.logger.info(
            "collaboration_interest_reviewed",
            post_id=post.id,
            interest_id=interest.id,
            status=status,
            post_status=post.status,
        )
        return interest

