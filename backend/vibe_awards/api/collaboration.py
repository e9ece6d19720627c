"""Collaboration board API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.dependencies import get_current_user, get_db
from vibe_awards.models.user import User
from vibe_awards.schemas import (
    CreatePostRequest,
    InterestRequest,
    InterestResponse,
    MessageResponse,
    PostCreatedResponse,
    PostListResponse,
    PostResponse,
    ReviewInterestRequest,
)
from vibe_awards.services.collaboration_service import CollaborationService
from vibe_awards.services.query_service import QueryService

router = APIRouter()


@router.get("/posts", response_model=PostListResponse)
async def list_posts(
    category: Optional[str] = Query(None, description="Project category"),
    stage: Optional[str] = Query(None, description="Project stage"),
    collaboration_type: Optional[str] = Query(None, alias="type", description="Collaboration type"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List open collaboration posts, newest first."""
    service = QueryService(db)
    posts, total = await service.list_collaboration_posts(
        category=category,
        stage=stage,
        collaboration_type=collaboration_type,
        limit=limit,
        offset=offset,
    )
    return PostListResponse(posts=posts, total=total)


@router.get("/posts/{post_ref}", response_model=PostResponse)
async def get_post(post_ref: str, db: AsyncSession = Depends(get_db)):
    """Get a post by id or uuid. Counts as a view."""
    service = QueryService(db)
    post = await service.get_collaboration_post(post_ref)
    await db.commit()
    return post


@router.post("/posts", response_model=PostCreatedResponse, status_code=201)
async def create_post(
    body: CreatePostRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = CollaborationService(db)
    post = await service.create_post(current_user, **body.model_dump())
    await db.commit()

    data = PostResponse.model_validate(post).model_copy(update={"owner_name": current_user.username})
    return PostCreatedResponse(message="Collaboration post created successfully", post=data)


@router.post("/posts/{post_ref}/interest", response_model=MessageResponse)
async def express_interest(
    post_ref: str,
    body: InterestRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Express interest in someone else's open post. Once per user."""
    service = CollaborationService(db)
    await service.express_interest(
        post_ref,
        current_user,
        message=body.message,
        portfolio_url=body.portfolio_url,
        contact_info=body.contact_info,
    )
    await db.commit()
    return MessageResponse(message="Interest expressed successfully")


@router.patch("/posts/{post_ref}/interests/{interest_id}", response_model=InterestResponse)
async def review_interest(
    post_ref: str,
    interest_id: int,
    body: ReviewInterestRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Accept or reject an interest on one of your posts."""
    service = CollaborationService(db)
    interest = await service.review_interest(post_ref, interest_id, body.status, current_user)
    await db.commit()
    return InterestResponse.model_validate(interest)
