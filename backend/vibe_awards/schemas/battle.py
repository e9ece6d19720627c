"""Battle schemas."""

from datetime import date, datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel

BattleStatus = Literal["upcoming", "active", "completed"]


class BattleSide(BaseModel):
    """Summary of one submission taking part in a battle."""
    id: int
    uuid: str
    name: str
    short_description: str
    icon_url: Optional[str] = None
    category: str
    platform: str
    developer_name: str


class BattleResponse(BaseModel):
    id: int
    uuid: str
    category: str
    battle_date: date
    status: str
    votes_a: int
    votes_b: int
    total_votes: int
    winner_id: Optional[int] = None
    app_a: BattleSide
    app_b: BattleSide
    created_at: datetime


class CreateBattleRequest(BaseModel):
    app_a_id: Union[int, str]
    app_b_id: Union[int, str]
    battle_date: date
    category: str = "Featured"
    status: Literal["upcoming", "active"] = "upcoming"


class UpdateBattleStatusRequest(BaseModel):
    """Status change; winner_id is only honoured when completing."""
    status: BattleStatus
    winner_id: Optional[Union[int, str]] = None
