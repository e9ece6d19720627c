"""Apps (submissions) API endpoints: listing, detail, submit, delete and engagement."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.dependencies import get_acting_identity, get_current_user, get_db
from vibe_awards.models.user import User
from vibe_awards.schemas import (
    AppBrief,
    AppCreatedResponse,
    AppDetailResponse,
    AppListResponse,
    EngagementStatusResponse,
    LikeResponse,
    MessageResponse,
    SubmitAppRequest,
)
from vibe_awards.services.engagement_service import EngagementService
from vibe_awards.services.identity import ActingIdentity
from vibe_awards.services.query_service import QueryService
from vibe_awards.services.submission_service import SubmissionService

router = APIRouter()


@router.get("", response_model=AppListResponse)
async def list_apps(
    category: Optional[str] = Query(None, description="Category filter; 'all' disables it"),
    status: str = Query("approved", description="Status filter; 'all' disables it"),
    project_type: Optional[str] = Query(None, description="Project type filter"),
    featured: Optional[bool] = Query(None),
    trending: Optional[bool] = Query(None),
    staff_pick: Optional[bool] = Query(None),
    battle_ready: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    offset: int = Query(0, ge=0, description="Items to skip"),
    db: AsyncSession = Depends(get_db),
):
    """List apps, newest first, with live like/nomination/vote counts.

    total is the number of apps matching the filters, not the page size.
    """
    service = QueryService(db)
    apps, total = await service.list_submissions(
        category=category,
        status=status,
        project_type=project_type,
        featured=featured,
        trending=trending,
        staff_pick=staff_pick,
        battle_ready=battle_ready,
        limit=limit,
        offset=offset,
    )
    return AppListResponse(apps=apps, total=total)


@router.post("", response_model=AppCreatedResponse, status_code=201)
async def submit_app(
    body: SubmitAppRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Submit an app for review. It stays pending until approved."""
    service = SubmissionService(db)
    submission = await service.create(current_user, **body.model_dump())
    await db.commit()
    return AppCreatedResponse(
        message="App submitted successfully",
        app=AppBrief.model_validate(submission),
    )


@router.get("/{app_ref}", response_model=AppDetailResponse)
async def get_app(app_ref: str, db: AsyncSession = Depends(get_db)):
    """Get app detail by id or uuid. Counts as a view."""
    service = QueryService(db)
    app = await service.get_submission(app_ref)
    await db.commit()
    return app


@router.delete("/{app_ref}", response_model=MessageResponse)
async def delete_app(
    app_ref: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete an app (owner or admin) along with its engagement and battles."""
    service = SubmissionService(db)
    await service.delete(app_ref, current_user)
    await db.commit()
    return MessageResponse(message="App deleted successfully")


@router.post("/{app_ref}/like", response_model=LikeResponse)
async def toggle_like(
    app_ref: str,
    identity: ActingIdentity = Depends(get_acting_identity),
    db: AsyncSession = Depends(get_db),
):
    """Like or unlike an app. Anonymous callers are identified by IP."""
    service = EngagementService(db)
    result = await service.toggle_like(app_ref, identity)
    await db.commit()
    message = "App liked" if result.liked else "Like removed"
    return LikeResponse(message=message, liked=result.liked)


@router.post("/{app_ref}/nominate", response_model=MessageResponse)
async def nominate_app(
    app_ref: str,
    identity: ActingIdentity = Depends(get_acting_identity),
    db: AsyncSession = Depends(get_db),
):
    """Nominate an app for a battle. Once per acting identity."""
    service = EngagementService(db)
    await service.nominate(app_ref, identity)
    await db.commit()
    return MessageResponse(message="App nominated for battle")


@router.get("/{app_ref}/engagement", response_model=EngagementStatusResponse)
async def get_engagement(
    app_ref: str,
    identity: ActingIdentity = Depends(get_acting_identity),
    db: AsyncSession = Depends(get_db),
):
    """Whether the caller has liked and nominated the app."""
    service = EngagementService(db)
    return await service.get_status(app_ref, identity)
