"""Submission write paths: submitting and deleting apps."""

from typing import Iterable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.core.exceptions import PermissionDeniedError
from vibe_awards.models.submission import Submission, SubmissionFeature
from vibe_awards.models.user import User
from vibe_awards.services.lookup import Ref, get_by_ref

logger = structlog.get_logger(__name__)


class SubmissionService:
    """Service for creating and removing submissions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="submission_service")

    async def create(
        self,
        developer: User,
        *,
        name: str,
        short_description: str,
        full_description: str,
        category: str,
        platform: str,
        project_type: str = "app",
        features: Iterable[str] = (),
        icon_url: Optional[str] = None,
        website_url: Optional[str] = None,
        store_url: Optional[str] = None,
        demo_url: Optional[str] = None,
        github_url: Optional[str] = None,
    ) -> Submission:
        """Create a pending submission owned by developer.

        New submissions start with zero counters and wait for moderation
        before they show up in the default (approved) listing.
        """
        submission = Submission(
            developer_id=developer.id,
            name=name,
            short_description=short_description,
            full_description=full_description,
            category=category,
            platform=platform,
            project_type=project_type,
            icon_url=icon_url,
            website_url=website_url,
            store_url=store_url,
            demo_url=demo_url,
            github_url=github_url,
            status="pending",
        )
        submission.features = [
            SubmissionFeature(name=feature.strip())
            for feature in features
            if feature and feature.strip()
        ]
        self.db.add(submission)
        await self.db.flush()

        self.logger.info(
            "submission_created",
            submission_id=submission.id,
            developer_id=developer.id,
            features=len(submission.features),
        )
        return submission

    async def delete(self, ref: Ref, actor: User) -> None:
        """Delete a submission and everything hanging off it.

        Features, likes, nominations, votes and every battle the submission
        takes part in go with it, through ON DELETE CASCADE.

        Raises:
            NotFoundError: submission does not exist
            PermissionDeniedError: actor is neither the owner nor an admin
        """
        submission = await get_by_ref(self.db, Submission, ref, "App")
        if submission.developer_id != actor.id and not actor.is_admin:
            raise PermissionDeniedError()

        submission_id = submission.id
        await self.db.delete(submission)
        await self.db.flush()
        self.logger.info("submission_deleted", submission_id=submission_id, actor_id=actor.id)

