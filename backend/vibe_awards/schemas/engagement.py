"""Engagement request/response schemas: likes, nominations and votes."""

from typing import Optional, Union

from pydantic import BaseModel


class LikeResponse(BaseModel):
    message: str
    liked: bool


class EngagementStatusResponse(BaseModel):
    """Whether the caller's acting identity liked / nominated an app."""
    liked: bool
    nominated: bool


class VoteRequest(BaseModel):
    """Vote body; app_id is the numeric id or uuid of one battle side.

    Left optional so a missing, null or empty app_id gets the same
    "app_id is required" error.
    """
    app_id: Optional[Union[int, str]] = None


class MyVoteResponse(BaseModel):
    app_id: Optional[int] = None
