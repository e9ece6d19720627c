"""Collaboration board schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ProjectStage = Literal["idea", "prototype", "mvp", "near_complete"]
CollaborationType = Literal["co_founder", "developer", "designer", "marketer", "mentor", "other"]


class CreatePostRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    project_stage: ProjectStage
    collaboration_type: CollaborationType
    skills_needed: str = Field(min_length=1)
    project_category: str = Field(min_length=1, max_length=100)
    tech_stack: Optional[str] = None
    repo_url: Optional[str] = Field(None, max_length=1000)
    demo_url: Optional[str] = Field(None, max_length=1000)
    contact_method: Optional[str] = Field(None, max_length=320)
    equity_offered: bool = False
    paid_opportunity: bool = False
    time_commitment: Optional[str] = Field(None, max_length=100)
    deadline: Optional[str] = Field(None, max_length=32)


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: str
    user_id: int
    owner_name: Optional[str] = None
    title: str
    description: str
    project_stage: str
    collaboration_type: str
    skills_needed: str
    project_category: str
    tech_stack: Optional[str] = None
    repo_url: Optional[str] = None
    demo_url: Optional[str] = None
    contact_method: Optional[str] = None
    equity_offered: bool
    paid_opportunity: bool
    time_commitment: Optional[str] = None
    deadline: Optional[str] = None
    status: str
    view_count: int
    interest_count: int
    created_at: datetime


class PostCreatedResponse(BaseModel):
    message: str
    post: PostResponse


class PostListResponse(BaseModel):
    posts: List[PostResponse]
    total: int


class InterestRequest(BaseModel):
    message: Optional[str] = Field(None, max_length=5000)
    portfolio_url: Optional[str] = Field(None, max_length=1000)
    contact_info: Optional[str] = Field(None, max_length=320)


class ReviewInterestRequest(BaseModel):
    status: Literal["accepted", "rejected"]


class InterestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: int
    message: Optional[str] = None
    portfolio_url: Optional[str] = None
    contact_info: Optional[str] = None
    status: str
    created_at: datetime
