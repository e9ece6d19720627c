"""Battle API endpoints: listing, current battle, voting and administration."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.core.exceptions import ValidationFailedError
from vibe_awards.dependencies import get_acting_identity, get_db, require_admin
from vibe_awards.models.user import User
from vibe_awards.schemas import (
    BattleResponse,
    CreateBattleRequest,
    MessageResponse,
    MyVoteResponse,
    UpdateBattleStatusRequest,
    VoteRequest,
)
from vibe_awards.services.battle_service import BattleService
from vibe_awards.services.engagement_service import EngagementService
from vibe_awards.services.identity import ActingIdentity
from vibe_awards.services.query_service import QueryService

router = APIRouter()


@router.get("", response_model=List[BattleResponse])
async def list_battles(
    status: Optional[str] = Query(None, description="upcoming, active or completed"),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List battles, most recent battle date first."""
    service = QueryService(db)
    return await service.list_battles(status=status, limit=limit)


@router.get("/current", response_model=Optional[BattleResponse])
async def get_current_battle(db: AsyncSession = Depends(get_db)):
    """The latest active battle, or null when none is running."""
    service = QueryService(db)
    return await service.get_current_battle()


@router.post("", response_model=BattleResponse, status_code=201)
async def create_battle(
    body: CreateBattleRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Schedule a battle between two apps (admin only)."""
    service = BattleService(db)
    battle = await service.create(
        body.app_a_id,
        body.app_b_id,
        battle_date=body.battle_date,
        category=body.category,
        status=body.status,
    )
    await db.commit()
    return QueryService(db).battle_view(battle)


@router.get("/{battle_ref}", response_model=BattleResponse)
async def get_battle(battle_ref: str, db: AsyncSession = Depends(get_db)):
    service = QueryService(db)
    return await service.get_battle(battle_ref)


@router.patch("/{battle_ref}/status", response_model=BattleResponse)
async def update_battle_status(
    battle_ref: str,
    body: UpdateBattleStatusRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Move a battle along upcoming -> active -> completed (admin only)."""
    service = BattleService(db)
    battle = await service.update_status(battle_ref, body.status, winner_ref=body.winner_id)
    await db.commit()
    return QueryService(db).battle_view(battle)


@router.post("/{battle_ref}/vote", response_model=MessageResponse)
async def cast_vote(
    battle_ref: str,
    body: VoteRequest,
    request: Request,
    identity: ActingIdentity = Depends(get_acting_identity),
    db: AsyncSession = Depends(get_db),
):
    """Vote for one side of a battle. One vote per acting identity.

    Only active battles take votes; upcoming and completed battles reply 400
    "Battle is not open for voting (status: ...)".
    """
    if not body.app_id:
        raise ValidationFailedError("app_id is required")

    service = EngagementService(db)
    await service.cast_vote(
        battle_ref,
        body.app_id,
        identity,
        user_agent=request.headers.get("user-agent"),
    )
    await db.commit()
    return MessageResponse(message="Vote cast successfully")


@router.get("/{battle_ref}/my-vote", response_model=Optional[MyVoteResponse])
async def get_my_vote(
    battle_ref: str,
    identity: ActingIdentity = Depends(get_acting_identity),
    db: AsyncSession = Depends(get_db),
):
    """The app the caller voted for in this battle, or null."""
    service = EngagementService(db)
    app_id = await service.get_vote(battle_ref, identity)
    return MyVoteResponse(app_id=app_id) if app_id is not None else None
